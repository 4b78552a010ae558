"""
game_scene.py
-------------
Main gameplay scene.

Responsibilities
----------------
- Build the per-run state, player and child managers
- Route input to the player (fly, move, dash, pointer follow)
- React to gameplay events with sounds, particles and popups
- Damage, hit-stop, game over and restart
- End-of-run report: score submission and the leaderboard with this run highlighted
"""

import pygame

from birddash.core.debug.debug_logger import DebugLogger
from birddash.core.runtime.game_settings import Debug, Layers, Online, PowerUps
from birddash.core.runtime.game_state import GameState
from birddash.core.services.event_manager import (
    get_events,
    ItemCollectedEvent,
    ObstacleHitEvent,
    PlayerDamagedEvent,
    PlayerHealedEvent,
    PowerUpActivatedEvent,
    ScreenShakeEvent,
    FloatingTextEvent,
    GameOverEvent,
)
from birddash.entities.player import Player
from birddash.graphics.element_sizing import ElementSizing
from birddash.graphics.particles import ParticleEmitter, ParticleOverlay
from birddash.online.api_client import ApiError
from birddash.scenes.base_scene import BaseScene
from birddash.systems.collectible_manager import CollectibleManager
from birddash.systems.difficulty import DifficultyManager
from birddash.systems.obstacle_manager import ObstacleManager
from birddash.systems.power_ups import PowerUpSystem
from birddash.ui.hud_manager import HUDManager
from birddash.ui.responsive_utils import ResponsiveUtils


IMPACT_SHAKE = (8.0, 0.3)
IMPACT_FLASH = ((255, 0, 0), 0.2)
GAME_OVER_INPUT_DELAY_MS = 600


class GameScene(BaseScene):
    """One run of BirdDash, from first flap to game over."""

    def __init__(self, services):
        super().__init__(services)
        self.input_context = "gameplay"

        self.textures = services.get_global("textures")
        self.sounds = services.get_global("sound_manager")
        self.session_stats = services.get_global("session_stats")
        self.api_client = services.get_global("api_client")

        self.username = Online.PLAYER_NAME
        self.hit_stop_ms = 0.0
        self.game_over_ms = 0.0
        self.new_best = False
        self.submission = None
        self.submit_result = None
        self.leaderboard = []
        self._pointer_down = False
        self._subscriptions = []

    # ===========================================================
    # Lifecycle
    # ===========================================================

    def on_enter(self):
        w, h = self.screen_size
        self.sizing = ElementSizing(w, h)
        self.responsive = ResponsiveUtils(w, h)
        screen_mult = self.responsive.screen_speed_multiplier

        self.state = GameState()
        self.difficulty = DifficultyManager(self.state)

        player_size = self.sizing.size_for("player")
        self.player = Player(
            w * 0.25, h / 2, (w, h), scale=self.sizing.scale_factor, size=player_size,
            image=self.textures.get("player", player_size) if self.textures else None,
        )
        self.services.register_entity("player", self.player)

        self.power_ups = PowerUpSystem(
            self.state, self.player,
            get_collectibles=lambda: self.collectibles.active_beans(),
            collect_fn=lambda bean: self.collectibles.collect_bean(bean, by_companion=True),
            textures=self.textures, sounds=self.sounds,
        )
        self.collectibles = CollectibleManager(
            self.state, (w, h), self.sizing, power_ups=self.power_ups, player=self.player,
            textures=self.textures, screen_mult=screen_mult,
        )
        self.obstacles = ObstacleManager(
            self.state, (w, h), self.sizing, player=self.player, textures=self.textures,
            on_damage=self.take_damage, screen_mult=screen_mult,
        )

        self.hud = HUDManager(self.responsive, self.textures)
        self.hud.bind(state=self.state, player=self.player,
                      power_ups=self.power_ups, difficulty=self.difficulty)
        self.steam = ParticleOverlay("steam", max_particles=30, spawn_rate=6,
                                     spawn_area=(0, h * 0.9, w, h * 0.1))

        self._subscribe_events()
        DebugLogger.state("Run started", category="game_state")

    def on_exit(self):
        events = get_events()
        for event_type, callback in self._subscriptions:
            events.unsubscribe(event_type, callback)
        self._subscriptions.clear()

        self.power_ups.deactivate_all()
        self.collectibles.release_all()
        self.obstacles.release_all()
        ParticleEmitter.clear_all()
        self.steam.clear()

    def _subscribe_events(self):
        events = get_events()
        self._subscriptions = [
            (ItemCollectedEvent, self._on_item_collected),
            (ObstacleHitEvent, self._on_obstacle_hit),
            (PlayerHealedEvent, self._on_player_healed),
            (PowerUpActivatedEvent, self._on_power_up_activated),
            (FloatingTextEvent, self._on_floating_text),
            (ScreenShakeEvent, self._on_screen_shake),
        ]
        for event_type, callback in self._subscriptions:
            events.subscribe(event_type, callback)

    # ===========================================================
    # Event Handlers
    # ===========================================================

    def _on_item_collected(self, event):
        if event.category == "power_up":
            self._play("power_up")
            ParticleEmitter.burst("sparkle", event.position, 12)
            self.hit_stop_ms = PowerUps.COLLECT_HIT_STOP_MS
        else:
            self._play("collect")
            ParticleEmitter.burst("collect", event.position, 8)

    def _on_obstacle_hit(self, event):
        if event.blocked:
            self._play("shield_block")
            ParticleEmitter.burst("shield", event.position, 10)

    def _on_player_healed(self, event):
        ParticleEmitter.burst("sparkle", self.player.pos, 10)
        self.hud.add_floating_text("+1 ❤", (self.player.x, self.player.y - 40), (255, 105, 180))

    def _on_power_up_activated(self, event):
        if event.power_up == "shield" and not event.refreshed:
            ParticleEmitter.burst("shield", self.player.pos, 14)

    def _on_floating_text(self, event):
        self.hud.add_floating_text(event.text, event.position, event.color)

    def _on_screen_shake(self, event):
        self.draw_manager.trigger_shake(event.intensity, event.duration)

    def _play(self, name):
        if self.sounds is not None:
            self.sounds.play_sfx(name)

    # ===========================================================
    # Input
    # ===========================================================

    def handle_event(self, event):
        if not self.state.game_running:
            return
        if event.type == pygame.MOUSEBUTTONDOWN:
            self._pointer_down = True
        elif event.type == pygame.MOUSEBUTTONUP:
            self._pointer_down = False
            self.player.stop_fluid_movement()
        elif event.type == pygame.MOUSEMOTION and self._pointer_down and event.rel[1] != 0:
            self.player.update_fluid_position(event.pos[1])

    def _handle_gameplay_input(self):
        im = self.input_manager
        if im.action_pressed("fly") or im.pointer_pressed():
            self.player.fly()
            self._play("jump")
        if im.action_held("move_left"):
            self.player.move_left()
        if im.action_held("move_right"):
            self.player.move_right()
        if im.action_pressed("dash"):
            self.perform_dash()

    # ===========================================================
    # Actions
    # ===========================================================

    def perform_dash(self) -> bool:
        """Dash forward unless a dash is already running or the run is over."""
        if not self.state.game_running or self.state.is_dashing:
            return False
        if not self.player.dash():
            return False
        self.state.is_dashing = True
        self._play("dash")
        ParticleEmitter.burst("burst", self.player.pos, 10, direction=(-1, 0))
        return True

    def take_damage(self, source=None, position=None, particles=15):
        """
        Resolve an unblocked obstacle hit.

        Args:
            source: Obstacle type key (for logging)
            position: Impact point for the particle burst
            particles: Burst size

        Returns:
            bool: True if the player lost health
        """
        if self.player.shield_active:
            self._play("shield_block")
            return False

        self._play("explosion")
        damaged = self.player.take_damage()
        self.state.reset_combo()
        self._impact_effect(position or self.player.pos, particles)

        if damaged:
            get_events().dispatch(PlayerDamagedEvent(self.player.health, self.player.max_health))
            DebugLogger.state(f"Damaged by {source} ({self.player.health} hearts left)", category="player")

        if self.player.health <= 0:
            self.game_over()
        return damaged

    def _impact_effect(self, position, particles):
        self.draw_manager.trigger_shake(*IMPACT_SHAKE)
        self.draw_manager.trigger_flash(*IMPACT_FLASH)
        ParticleEmitter.burst("impact", position, particles)

    # ===========================================================
    # Game Over & Restart
    # ===========================================================

    def game_over(self):
        if not self.state.game_running:
            return
        self.state.game_running = False
        self.game_over_ms = 0.0

        self.power_ups.deactivate_all()
        self.collectibles.release_all()
        self.obstacles.release_all()
        self.obstacles.spawning_enabled = False

        summary = self.state.summary()
        self.new_best = summary["score"] > self.session_stats.best_score
        self.session_stats.record_run(summary)
        self._play("game_over")

        get_events().dispatch(GameOverEvent(summary))
        DebugLogger.section(f"Game Over - score {summary['score']}", only_title=True)

        if self.api_client is not None:
            self.submission = self.api_client.run_async(
                self.api_client.record_run, dict(summary, username=self.username), Online.LEADERBOARD_SIZE
            )

    def _poll_submission(self):
        if self.submission is None or not self.submission.done():
            return
        future, self.submission = self.submission, None
        try:
            result = future.result()
        except ApiError as e:
            DebugLogger.warn(f"Score submission failed: {e}", category="online")
            return

        self.submit_result = result
        self.leaderboard = result.get("leaderboard", [])
        rank = result.get("rank")
        if rank:
            self.session_stats.last_rank = rank
            if rank <= 10 and self.sounds is not None:
                self.sounds.play_ranking(rank)
            DebugLogger.state(f"Leaderboard rank #{rank}", category="online")

    def restart(self):
        DebugLogger.action("Restarting run", category="scene")
        self.services.transition_to("Game")

    # ===========================================================
    # Update
    # ===========================================================

    def update(self, dt: float):
        self.steam.update(dt)
        self.hud.update(dt)
        self.draw_manager.update_effects(dt)

        if not self.state.game_running:
            self._update_game_over(dt)
            return

        if self.hit_stop_ms > 0:
            self.hit_stop_ms -= dt * 1000.0
            return

        self._handle_gameplay_input()

        self.state.update(dt)
        diff = self.difficulty.update()

        self.player.update(dt)
        self.state.is_dashing = self.player.is_dashing
        self.power_ups.update(dt)

        self.collectibles.update(dt, diff)
        self.obstacles.update(dt, diff)
        self.collectibles.check_collisions()
        if self.state.game_running:
            self.obstacles.check_collisions()

        ParticleEmitter.update_all(dt)

    def _update_game_over(self, dt):
        ParticleEmitter.update_all(dt)
        self._poll_submission()
        self.game_over_ms += dt * 1000.0
        if self.game_over_ms < GAME_OVER_INPUT_DELAY_MS:
            return
        if self.input_manager.pointer_pressed() or self.input_manager.action_pressed("fly"):
            self.restart()

    # ===========================================================
    # Draw
    # ===========================================================

    def draw(self, draw_manager):
        self.steam.render(draw_manager)
        self.collectibles.draw(draw_manager)
        self.obstacles.draw(draw_manager)
        self.power_ups.draw(draw_manager)
        if self.state.game_running:
            self.player.draw(draw_manager)
        ParticleEmitter.render_all(draw_manager)
        self.hud.draw(draw_manager)

        if Debug.HITBOX_VISIBLE:
            self._draw_hitboxes(draw_manager)
        if not self.state.game_running:
            self._draw_game_over(draw_manager)

    def _draw_hitboxes(self, draw_manager):
        draw_manager.queue_hitbox(self.player.hitbox(), (0, 255, 0), Debug.HITBOX_LINE_WIDTH)
        for bean in self.collectibles.active_beans():
            draw_manager.queue_hitbox(bean.hitbox(), (255, 255, 0), Debug.HITBOX_LINE_WIDTH)
        for item in self.collectibles.active_power_ups():
            draw_manager.queue_hitbox(item.hitbox(), (0, 200, 255), Debug.HITBOX_LINE_WIDTH)
        for obstacle in self.obstacles.active_obstacles():
            draw_manager.queue_hitbox(obstacle.hitbox(0.85), (255, 0, 0), Debug.HITBOX_LINE_WIDTH)

    def _draw_game_over(self, draw_manager):
        w, h = self.screen_size
        r = self.responsive
        cx = w / 2

        overlay = pygame.Surface((w, h), pygame.SRCALPHA)
        overlay.fill((0, 0, 0, 170))
        draw_manager.queue_draw(overlay, overlay.get_rect(), Layers.OVERLAY)

        draw_manager.queue_text("GAME OVER", (cx, h * 0.14), r.font_size("GIANT"),
                                (255, 80, 80), Layers.OVERLAY + 1, bold=True)
        draw_manager.queue_text(f"{self.state.score:,}", (cx, h * 0.24), r.font_size("GIANT"),
                                (255, 215, 0), Layers.OVERLAY + 1, bold=True)

        lines = [f"Best {self.session_stats.best_score:,}   Combo x{self.state.max_combo_reached}"]
        if self.new_best:
            lines.append("NEW BEST!")
        if self.submission is not None:
            lines.append("Submitting score...")
        elif self.submit_result:
            rank = self.submit_result.get("rank")
            suffix = " (offline)" if self.submit_result.get("offline") else ""
            if rank:
                lines.append(f"Leaderboard rank #{rank}{suffix}")

        for i, line in enumerate(lines):
            draw_manager.queue_text(line, (cx, h * 0.32 + i * r.font_size("LARGE") * 1.5),
                                    r.font_size("LARGE"), (255, 255, 255), Layers.OVERLAY + 1)

        row_size = r.font_size("MEDIUM")
        for i, (text, is_player) in enumerate(self.leaderboard_rows()):
            draw_manager.queue_text(text, (cx, h * 0.46 + i * row_size * 1.5), row_size,
                                    (255, 215, 0) if is_player else (230, 220, 200),
                                    Layers.OVERLAY + 1, bold=is_player)

        if self.game_over_ms >= GAME_OVER_INPUT_DELAY_MS:
            draw_manager.queue_text("Click to Restart", (cx, h * 0.9), r.font_size("XLARGE"),
                                    (255, 255, 255), Layers.OVERLAY + 1, bold=True)

    def leaderboard_rows(self):
        """
        Lines for the end-of-run leaderboard.

        Returns:
            list[tuple[str, bool]]: (text, is this run's entry), at most
            Online.VISIBLE_ROWS long
        """
        entry_id = (self.submit_result or {}).get("entry_id")
        rows = []
        for row in self.leaderboard[:Online.VISIBLE_ROWS]:
            text = f"{row.get('rank', len(rows) + 1):>2}. {row.get('username') or 'Guest'}  {row.get('score', 0):,}"
            rows.append((text, entry_id is not None and row.get("id") == entry_id))
        return rows
