from django.urls import path
from .views import (
    health,
    get_config,
    start_game,
    reveal_clue,
    get_game,
)

urlpatterns = [
    path('health/', health, name='Health'),
    path('config', get_config, name='board-config'),
    path('start-game', start_game, name='start-game'),
    path('reveal', reveal_clue, name='reveal'),
    path('game/<str:game_id>', get_game, name='game-detail'),
]
