"""TV mode: rotate dashboard scenes on the terminal."""

import time
from typing import List, Optional

import click
from sqlalchemy import select

from ..cli.base import BaseCommand, command_error_handler
from ..cli.config import Config
from ..db.changes import ChangeFeed, ClientWatcher
from ..db.models import Client
from ..tv.rotation import SceneRotation
from ..tv.scenes import Scene, TVClient, apply_scene, grid_columns

class TVCommand(BaseCommand):
    """Show the scene rotation, reloading clients when they change."""

    def __init__(self, config: Config, cycles: Optional[int] = None, start: int = 0):
        """Initialize command.

        Args:
            config: Application configuration
            cycles: Stop after this many scenes; run until interrupted when None
            start: Index of the first scene
        """
        super().__init__(config)
        self.cycles = cycles
        self.start = start
        self.clients: List[TVClient] = []
        self.shown = 0
        self.feed: Optional[ChangeFeed] = None
        self.subscription = None
        self.watcher: Optional[ClientWatcher] = None

    def load_clients(self) -> None:
        with self.session_manager as session:
            rows = session.execute(
                select(Client).where(Client.is_active.is_(True)).order_by(Client.display_order)
            ).scalars()
            self.clients = [TVClient.from_client(client) for client in rows]
        if self.debug:
            self.logger.debug(f"Loaded {len(self.clients)} clients")

    def render(self, rotation: SceneRotation) -> None:
        scene: Scene = rotation.current
        shown = apply_scene(self.clients, scene)
        columns = grid_columns(len(shown), scene.filtros.densidade)

        click.clear()
        click.secho(
            f"{scene.titulo} ({rotation.index + 1}/{len(rotation.scenes)})  "
            f"{len(shown)} empresas  {time.strftime('%H:%M')}",
            bold=True
        )
        if not shown:
            click.echo("\nNenhuma empresa nesta cena")
            return

        width = max(len(c.name) for c in shown) + 10
        for start in range(0, len(shown), columns):
            row = shown[start:start + columns]
            click.echo(''.join(
                f"{start + offset + 1:>3}. {client.name} ({client.total_demands})".ljust(width)
                for offset, client in enumerate(row)
            ))

    def watch(self) -> None:
        """Subscribe to client changes, local or committed by other processes."""
        self.feed = ChangeFeed(self.session_manager)
        self.subscription = self.feed.subscribe([Client.__tablename__])
        self.watcher = ClientWatcher(self.session_manager, self.feed)

    def stop_watching(self) -> None:
        if self.subscription is not None:
            self.subscription.close()
        if self.feed is not None:
            self.feed.detach()

    def refresh(self, rotation: SceneRotation) -> bool:
        """Reload and redraw when clients changed; returns True if they did."""
        self.watcher.check()
        if not self.subscription.drain():
            return False
        self.load_clients()
        self.render(rotation)
        return True

    @command_error_handler
    def execute(self) -> None:
        self.watch()
        self.load_clients()

        rotation = SceneRotation()
        rotation.go_to(self.start)
        self.render(rotation)
        tick = self.config.tv_tick_seconds

        try:
            while self.cycles is None or self.shown < self.cycles:
                time.sleep(tick)
                self.refresh(rotation)
                if rotation.tick(tick):
                    self.shown += 1
                    self.render(rotation)
        except KeyboardInterrupt:
            click.echo()
        finally:
            self.stop_watching()

__all__ = ['TVCommand']
