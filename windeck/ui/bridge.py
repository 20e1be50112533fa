#!/usr/bin/env python3
"""
bridge.py - Startup pipeline for the launcher UI and the library message.

Stages run strictly in order, each one triggering the next:

    IDLE -> ENVIRONMENT_READY -> CONTROLLER_READY -> NAVIGATION_COMPLETE

When navigation completes the discovered games are pushed to the surface
once, as a JSON array of {"name", "path", "appId"} objects. JSON escaping
doubles every backslash in Windows paths; decode_library() undoes it.
"""

import json
from enum import IntEnum

from windeck.discovery.models import Game


class PipelineError(RuntimeError):
    pass


class Stage(IntEnum):
    IDLE = 0
    ENVIRONMENT_READY = 1
    CONTROLLER_READY = 2
    NAVIGATION_COMPLETE = 3


def encode_library(games) -> str:
    return json.dumps(
        [{"name": g.name, "path": g.path, "appId": g.app_id} for g in games],
        ensure_ascii=False,
    )


def decode_library(text: str) -> list[Game]:
    return [
        Game(name=item["name"], path=item["path"], app_id=item.get("appId", ""))
        for item in json.loads(text)
    ]


class UiBridge:
    def __init__(self, log, surface, games, index_page: str):
        self.log = log
        self.surface = surface
        self.games = list(games)
        self.index_page = index_page
        self.stage = Stage.IDLE
        self.library_pushed = False

    def _advance(self, stage: Stage):
        if stage != self.stage + 1:
            raise PipelineError(f"cannot go from {self.stage.name} to {stage.name}")
        self.stage = stage
        self.log.debug(f"[UI] stage {stage.name}")

    def start(self):
        """Run the pipeline up to navigation; the surface reports completion."""
        self.surface.create_environment()
        self._advance(Stage.ENVIRONMENT_READY)

        self.surface.create_controller(on_message=self.on_message)
        self._advance(Stage.CONTROLLER_READY)

        self.surface.navigate(self.index_page, on_complete=self.navigation_complete)

    def navigation_complete(self):
        if self.stage == Stage.NAVIGATION_COMPLETE:
            # reloads re-fire the event; the library only goes out once
            return
        self._advance(Stage.NAVIGATION_COMPLETE)
        self.push_library()

    def push_library(self):
        if self.library_pushed:
            return
        self.surface.post_message(encode_library(self.games))
        self.library_pushed = True
        self.log.info(f"[UI] Sent {len(self.games)} games to the launcher")

    def on_message(self, text: str):
        self.log.info(f"[UI] message from launcher: {text}")
