"""
Pydantic Schemas for API - Request/response models for OpenAPI.

These models define the exact contract between the presentation layer
and the engine. Actions are a discriminated union on `type`, carrying
only column and card indices.

Error Codes:
- SESSION_NOT_FOUND: Session does not exist or has ended
- INVALID_ACTION: Action could not be parsed into an engine action
- VALIDATION_ERROR: Request body failed validation
- INTERNAL_ERROR: Unexpected server error
"""

from enum import Enum
from typing import Annotated, Literal, Optional, Union
from pydantic import BaseModel, Field, RootModel


# =============================================================================
# Enums
# =============================================================================

class SessionStatus(str, Enum):
    """Session status values."""
    ACTIVE = "active"
    WON = "won"
    ABANDONED = "abandoned"


class ErrorCode(str, Enum):
    """Structured error codes."""
    SESSION_NOT_FOUND = "SESSION_NOT_FOUND"
    INVALID_ACTION = "INVALID_ACTION"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"


# =============================================================================
# Shared Models
# =============================================================================

class CardInfo(BaseModel):
    """Card information for display."""
    card_id: str
    suit: str
    rank: int = Field(ge=1, le=13)
    label: str
    color: str
    face_up: bool

    model_config = {"from_attributes": True}


class GameStateResponse(BaseModel):
    """Complete game state for rendering."""
    stock: list[CardInfo] = Field(default_factory=list)
    waste: list[CardInfo] = Field(default_factory=list)
    foundation: dict[str, list[CardInfo]] = Field(default_factory=dict)
    tableau: list[list[CardInfo]] = Field(default_factory=list)
    move_count: int = Field(0, ge=0)
    elapsed_seconds: int = Field(0, ge=0)
    is_won: bool = False

    can_undo: bool = False
    history_size: int = 0


# =============================================================================
# Actions
# =============================================================================

ColumnIndex = Annotated[int, Field(ge=0, le=6, description="Tableau column, 0-6")]


class DrawCardAction(BaseModel):
    """Draw from the stock, or turn the waste over when the stock is empty."""
    type: Literal["draw_card"] = "draw_card"


class WasteToFoundationAction(BaseModel):
    type: Literal["move_waste_to_foundation"] = "move_waste_to_foundation"


class WasteToTableauAction(BaseModel):
    type: Literal["move_waste_to_tableau"] = "move_waste_to_tableau"
    to_col: ColumnIndex


class TableauToFoundationAction(BaseModel):
    type: Literal["move_tableau_to_foundation"] = "move_tableau_to_foundation"
    from_col: ColumnIndex


class TableauToTableauAction(BaseModel):
    """Move the run starting at card_index of from_col onto to_col."""
    type: Literal["move_tableau_to_tableau"] = "move_tableau_to_tableau"
    from_col: ColumnIndex
    to_col: ColumnIndex
    card_index: int = Field(..., ge=0, description="Index of the first card of the run")


class ResetGameAction(BaseModel):
    type: Literal["reset_game"] = "reset_game"


class UndoAction(BaseModel):
    type: Literal["undo"] = "undo"


ActionRequest = Annotated[
    Union[
        DrawCardAction,
        WasteToFoundationAction,
        WasteToTableauAction,
        TableauToFoundationAction,
        TableauToTableauAction,
        ResetGameAction,
        UndoAction,
    ],
    Field(discriminator="type"),
]


class ActionBody(RootModel[ActionRequest]):
    """Request body for dispatching one action."""

    def to_dict(self) -> dict:
        return self.root.model_dump()


# =============================================================================
# Request Models
# =============================================================================

class CreateSessionRequest(BaseModel):
    """Request to create a new game session."""
    seed: Optional[int] = Field(None, description="Seed for a reproducible deal")
    sound_enabled: bool = Field(True, description="Initial sound preference")


class PreferencesRequest(BaseModel):
    """Request to change session preferences."""
    sound_enabled: bool


# =============================================================================
# Response Models
# =============================================================================

class SessionResponse(BaseModel):
    """Session status and current game."""
    session_id: str
    status: SessionStatus
    created_at: float
    sound_enabled: bool = True
    game_state: Optional[GameStateResponse] = None
    api_version: str = "v1"


class ActionResponse(BaseModel):
    """Outcome of dispatching one action."""
    session_id: str
    accepted: bool
    reason: Optional[str] = Field(None, description="Why the action was ignored")
    events: list[str] = Field(
        default_factory=list, description="draw, shuffle, drop, flip, victory, undo, deal"
    )
    changes: list[str] = Field(default_factory=list)
    sound_enabled: bool = True
    game_state: GameStateResponse
    api_version: str = "v1"


class HintResponse(BaseModel):
    """A hint for the player."""
    session_id: str
    hint: str
    is_fallback: bool = False
    cached: bool = False


class PreferencesResponse(BaseModel):
    session_id: str
    sound_enabled: bool


class ErrorResponse(BaseModel):
    """Structured error response."""
    error: str
    error_code: ErrorCode
    details: Optional[dict] = None


class SessionListResponse(BaseModel):
    """Response listing active sessions."""
    sessions: list[str]
    count: int


class EndSessionResponse(BaseModel):
    """Response after ending a session."""
    success: bool
    session_id: str


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    service: str
    version: str
    environment: str
