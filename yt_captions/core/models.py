# Copyright (c) 2026 Pointmatic
#
# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""Pydantic data models for yt-captions."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator


class SubtitleTrack(BaseModel):
    model_config = ConfigDict(frozen=True)

    lang: str
    name: str
    url: str = ""
    origin: Literal["manual", "automatic"] = "manual"


class VideoMetadata(BaseModel):
    model_config = ConfigDict(frozen=True)

    video_id: str
    title: str
    description: str = ""
    duration: int = 0
    thumbnail: str = ""
    channel: str = ""
    upload_date: str = ""
    view_count: int = 0
    subtitles: tuple[SubtitleTrack, ...] = ()


class SubtitleEntry(BaseModel):
    start: float
    end: float
    text: str


# --- yt-dlp payload records ---


class _Payload(BaseModel):
    """Base for records parsed out of yt-dlp output.

    Explicit ``null`` values fall back to the field default, so a missing
    field and a null field read the same.
    """

    @field_validator("*", mode="before")
    @classmethod
    def _null_as_default(cls, value: Any, info: ValidationInfo) -> Any:
        if value is None and info.field_name is not None:
            field = cls.model_fields[info.field_name]
            if not field.is_required():
                return field.get_default(call_default_factory=True)
        return value


class CaptionFormat(_Payload):
    """One downloadable format of a caption track."""

    ext: str = ""
    url: str = ""
    name: str = ""


class InfoEnvelope(_Payload):
    """The ``--dump-json`` document for a single video."""

    id: str
    title: str
    description: str = ""
    duration: float = 0
    thumbnail: str = ""
    channel: str = ""
    uploader: str = ""
    upload_date: str = ""
    view_count: int = 0
    subtitles: dict[str, list[CaptionFormat]] = {}
    automatic_captions: dict[str, list[CaptionFormat]] = {}


class Json3Segment(_Payload):
    utf8: str = ""


class Json3Event(_Payload):
    model_config = ConfigDict(populate_by_name=True)

    start_ms: float = Field(0, alias="tStartMs")
    duration_ms: float = Field(0, alias="dDurationMs")
    segs: list[Json3Segment] = []


class Json3Payload(_Payload):
    events: list[Json3Event] = []
