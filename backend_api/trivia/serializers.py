from __future__ import annotations

from typing import Any, Dict, List, Optional

from rest_framework import serializers

from .board import Board, get_display_text, get_header_text


GAME_STATUSES = ["IDLE", "LOADING", "READY"]
REVEAL_STATES = ["hidden", "question", "answer"]


# PUBLIC_INTERFACE
def game_status(loading: bool, board: Optional[Board]) -> str:
    """Map session flags to the public status string."""
    if loading:
        return "LOADING"
    if board is None:
        return "IDLE"
    return "READY"


# PUBLIC_INTERFACE
def board_to_payload(board: Optional[Board], placeholder: str) -> List[Dict[str, Any]]:
    """Flatten a board into per-column dicts of per-cell display state."""
    if board is None:
        return []
    columns: List[Dict[str, Any]] = []
    for column, category in enumerate(board.categories):
        columns.append(
            {
                "title": category.title,
                "header": get_header_text(category),
                "clues": [
                    {
                        "column": column,
                        "row": row,
                        "state": clue.reveal_state.value,
                        "text": get_display_text(clue, placeholder),
                    }
                    for row, clue in enumerate(category.clues)
                ],
            }
        )
    return columns


# PUBLIC_INTERFACE
class StartGameRequestSerializer(serializers.Serializer):
    """Request payload to start or restart a game.

    Fields:
    - game_id (optional): existing game to restart; a new game is created when omitted
    - supersede (optional, default false): replace a board that is still loading
      instead of refusing the request
    """

    game_id = serializers.UUIDField(required=False, allow_null=True, format="hex")
    supersede = serializers.BooleanField(required=False, default=False)


# PUBLIC_INTERFACE
class CellSerializer(serializers.Serializer):
    """One board cell as shown to the player."""

    column = serializers.IntegerField()
    row = serializers.IntegerField()
    state = serializers.ChoiceField(choices=REVEAL_STATES)
    text = serializers.CharField(allow_blank=True)


# PUBLIC_INTERFACE
class CategoryColumnSerializer(serializers.Serializer):
    """A category with its cells, top to bottom.

    header is the text shown above the column; title is the source's raw title.
    """

    title = serializers.CharField(allow_blank=True)
    header = serializers.CharField(allow_blank=True)
    clues = CellSerializer(many=True)


# PUBLIC_INTERFACE
class GameResponseSerializer(serializers.Serializer):
    """Current board of a game."""

    game_id = serializers.CharField()
    generation = serializers.IntegerField()
    status = serializers.ChoiceField(choices=GAME_STATUSES)
    category_count = serializers.IntegerField()
    clues_per_category = serializers.IntegerField()
    categories = CategoryColumnSerializer(many=True)


# PUBLIC_INTERFACE
class RevealRequestSerializer(serializers.Serializer):
    """Request payload for a cell activation."""

    game_id = serializers.UUIDField(format="hex")
    generation = serializers.IntegerField(min_value=1)
    column = serializers.IntegerField(min_value=0)
    row = serializers.IntegerField(min_value=0)


# PUBLIC_INTERFACE
class RevealResponseSerializer(serializers.Serializer):
    """Response payload after a cell activation.

    changed is false when the clue already showed its answer; text then holds
    the answer that is still on display.
    """

    game_id = serializers.CharField()
    generation = serializers.IntegerField()
    column = serializers.IntegerField()
    row = serializers.IntegerField()
    state = serializers.ChoiceField(choices=REVEAL_STATES)
    text = serializers.CharField(allow_blank=True)
    changed = serializers.BooleanField()


# PUBLIC_INTERFACE
class BoardConfigSerializer(serializers.Serializer):
    """Board dimensions and the hidden-cell placeholder."""

    category_count = serializers.IntegerField()
    clues_per_category = serializers.IntegerField()
    placeholder = serializers.CharField()
