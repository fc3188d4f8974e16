from __future__ import annotations

import logging
from typing import Optional

from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework import status, permissions
from drf_yasg.utils import swagger_auto_schema

from .board import (
    Board,
    FetchError,
    GameSession,
    InsufficientPoolError,
    InvalidReferenceError,
    LoadInProgressError,
    StaleLoadError,
    get_display_text,
    load_board,
)
from .conf import get_board_config, get_registry, get_trivia_client
from .serializers import (
    StartGameRequestSerializer,
    GameResponseSerializer,
    RevealRequestSerializer,
    RevealResponseSerializer,
    BoardConfigSerializer,
    board_to_payload,
    game_status,
)

logger = logging.getLogger(__name__)


def _game_response(session: GameSession, board: Optional[Board] = None) -> dict:
    """Serialize a session; `board` overrides the session's own when given."""
    config = get_board_config()
    generation, loading, current = session.snapshot()
    if board is not None:
        generation, loading, current = board.generation, False, board
    resp = {
        "game_id": session.game_id,
        "generation": generation,
        "status": game_status(loading, current),
        "category_count": config.category_count,
        "clues_per_category": config.clues_per_category,
        "categories": board_to_payload(current, config.placeholder),
    }
    return GameResponseSerializer(resp).data


def _game_not_found() -> Response:
    return Response({"error": "Game not found."}, status=status.HTTP_404_NOT_FOUND)


# PUBLIC_INTERFACE
@api_view(["GET"])
@permission_classes([permissions.AllowAny])
def health(request):
    """Health check endpoint for the API.

    Returns:
    - 200 OK with {"message": "Server is up!"}
    """
    return Response({"message": "Server is up!"})


# PUBLIC_INTERFACE
@swagger_auto_schema(
    method="get",
    operation_id="board_config",
    operation_summary="Board dimensions",
    operation_description="Returns the number of categories, clues per category and the hidden-cell placeholder.",
    responses={200: BoardConfigSerializer},
    tags=["meta"],
)
@api_view(["GET"])
@permission_classes([permissions.AllowAny])
def get_config(request):
    """Expose the configured board dimensions."""
    config = get_board_config()
    resp = {
        "category_count": config.category_count,
        "clues_per_category": config.clues_per_category,
        "placeholder": config.placeholder,
    }
    return Response(BoardConfigSerializer(resp).data, status=status.HTTP_200_OK)


# PUBLIC_INTERFACE
@swagger_auto_schema(
    method="post",
    operation_id="start_game",
    operation_summary="Start or restart a game",
    operation_description="""
Load a fresh board from the trivia source and return it with every cell hidden.

Request body:
- game_id (hex uuid, optional): game to restart; omitted creates a new game
- supersede (bool, optional, default false): restart even while a board is loading

Errors:
- 404 unknown game_id
- 409 a board is already loading, or this load was superseded
- 502 the trivia source failed; no board is kept and the game can be restarted
""",
    request_body=StartGameRequestSerializer,
    responses={200: GameResponseSerializer},
    tags=["game"],
)
@api_view(["POST"])
@permission_classes([permissions.AllowAny])
def start_game(request):
    """Start a game: select categories, load each one, return the hidden grid."""
    serializer = StartGameRequestSerializer(data=request.data or {})
    serializer.is_valid(raise_exception=True)
    vd = serializer.validated_data

    game_id = vd.get("game_id")
    registry = get_registry()
    try:
        session = registry.get_or_create(game_id.hex if game_id else None)
    except KeyError:
        return _game_not_found()

    config = get_board_config()

    def _load(generation: int) -> Board:
        with get_trivia_client() as client:
            return load_board(
                config.category_count,
                client=client,
                clues_per_category=config.clues_per_category,
                pool_size=config.category_pool_size,
                generation=generation,
            )

    try:
        board = session.start(_load, supersede=vd.get("supersede", False))
    except LoadInProgressError as e:
        return Response(
            {"error": str(e), "status": "LOADING", "game_id": session.game_id},
            status=status.HTTP_409_CONFLICT,
        )
    except StaleLoadError as e:
        return Response(
            {"error": str(e), "status": "LOADING", "game_id": session.game_id},
            status=status.HTTP_409_CONFLICT,
        )
    except (FetchError, InsufficientPoolError) as e:
        logger.error(f"Game {session.game_id}: board load failed: {e}")
        return Response(
            {"error": str(e), "status": "IDLE", "game_id": session.game_id},
            status=status.HTTP_502_BAD_GATEWAY,
        )

    return Response(_game_response(session, board), status=status.HTTP_200_OK)


# PUBLIC_INTERFACE
@swagger_auto_schema(
    method="post",
    operation_id="reveal_clue",
    operation_summary="Reveal a clue",
    operation_description="""
Advance one cell: hidden -> question -> answer. Further clicks on an answered
cell change nothing (changed=false).

Request body:
- game_id (hex uuid, required)
- generation (int, required): generation of the board the cell belongs to
- column, row (int, required): cell coordinates

A generation that is not the current board's, or coordinates off the board,
return 404.
""",
    request_body=RevealRequestSerializer,
    responses={200: RevealResponseSerializer},
    tags=["game"],
)
@api_view(["POST"])
@permission_classes([permissions.AllowAny])
def reveal_clue(request):
    """Apply one reveal step to the referenced cell."""
    serializer = RevealRequestSerializer(data=request.data or {})
    serializer.is_valid(raise_exception=True)
    vd = serializer.validated_data

    try:
        session = get_registry().get(vd["game_id"].hex)
    except KeyError:
        return _game_not_found()

    try:
        clue, text = session.reveal(vd["generation"], vd["column"], vd["row"])
    except InvalidReferenceError as e:
        return Response({"error": str(e)}, status=status.HTTP_404_NOT_FOUND)

    resp = {
        "game_id": session.game_id,
        "generation": vd["generation"],
        "column": vd["column"],
        "row": vd["row"],
        "state": clue.reveal_state.value,
        "text": text if text is not None else get_display_text(clue),
        "changed": text is not None,
    }
    return Response(RevealResponseSerializer(resp).data, status=status.HTTP_200_OK)


# PUBLIC_INTERFACE
@swagger_auto_schema(
    method="get",
    operation_id="game_detail",
    operation_summary="Get the current board of a game",
    operation_description="""
Fetch the status (IDLE, LOADING, READY) and the display text of every cell.

Path parameters:
- game_id (str): game identifier returned by start-game.
""",
    responses={200: GameResponseSerializer},
    tags=["game"],
)
@api_view(["GET"])
@permission_classes([permissions.AllowAny])
def get_game(request, game_id):
    """Retrieve a game by id with the display text of every cell."""
    try:
        session = get_registry().get(game_id)
    except KeyError:
        return _game_not_found()
    return Response(_game_response(session), status=status.HTTP_200_OK)
