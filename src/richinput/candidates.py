from __future__ import annotations

import typing

from pydantic import ValidationError

from richinput.logger import logger
from richinput.models import Candidate, Emoji, TriggerKind, TriggerSpan, User


CandidateSource = typing.Callable[[str], list[Candidate]]


EMOJI_CATALOG: typing.Final[tuple[Emoji, ...]] = (
    Emoji(name="smile", glyph="\U0001F604"),
    Emoji(name="heart", glyph="❤️"),
    Emoji(name="thumbsup", glyph="\U0001F44D"),
    Emoji(name="thumbsdown", glyph="\U0001F44E"),
    Emoji(name="fire", glyph="\U0001F525"),
    Emoji(name="rocket", glyph="\U0001F680"),
    Emoji(name="wave", glyph="\U0001F44B"),
    Emoji(name="eyes", glyph="\U0001F440"),
    Emoji(name="clap", glyph="\U0001F44F"),
    Emoji(name="tada", glyph="\U0001F389"),
)


def filter_users(query: str, users: typing.Iterable[User]) -> list[Candidate]:
    needle = query.lower()
    return [
        user
        for user in users
        if needle in user.name.lower() or needle in user.email.lower()
    ]


def filter_emojis(
    query: str,
    catalog: typing.Iterable[Emoji] = EMOJI_CATALOG,
) -> list[Candidate]:
    needle = query.lower()
    return [emoji for emoji in catalog if needle in emoji.name.lower()]


def coerce_users(raw: typing.Any) -> list[User]:
    """Validate a host-supplied user catalog, dropping unusable entries."""
    if raw is None:
        return []
    if isinstance(raw, (str, bytes, dict)) or not isinstance(raw, typing.Iterable):
        logger.warning("user catalog is not a list", type=type(raw).__name__)
        return []
    users: list[User] = []
    for index, item in enumerate(raw):
        if isinstance(item, User):
            users.append(item)
            continue
        try:
            users.append(User.model_validate(item))
        except ValidationError as exc:
            logger.warning(
                "dropping invalid user catalog entry",
                index=index,
                errors=exc.error_count(),
            )
    return users


class CandidateProvider:
    """Maps an open trigger span to the candidates for its kind.

    Catalogs are supplied once per session and only read afterwards.
    """

    def __init__(
        self,
        users: typing.Any = None,
        emojis: typing.Iterable[Emoji] = EMOJI_CATALOG,
    ) -> None:
        self._users: tuple[User, ...] = tuple(coerce_users(users))
        self._emojis: tuple[Emoji, ...] = tuple(emojis)
        self._sources: dict[TriggerKind, CandidateSource] = {
            TriggerKind.MENTION: self._mention_candidates,
            TriggerKind.EMOJI: self._emoji_candidates,
        }

    @property
    def users(self) -> tuple[User, ...]:
        return self._users

    @property
    def emojis(self) -> tuple[Emoji, ...]:
        return self._emojis

    def set_users(self, users: typing.Any) -> None:
        self._users = tuple(coerce_users(users))
        logger.debug("user catalog loaded", count=len(self._users))

    def register(self, kind: TriggerKind, source: CandidateSource) -> None:
        self._sources[kind] = source

    def candidates_for(self, span: TriggerSpan) -> list[Candidate]:
        if not span.is_open:
            return []
        source = self._sources.get(span.kind)
        if source is None:
            return []
        return source(span.query)

    def _mention_candidates(self, query: str) -> list[Candidate]:
        return filter_users(query, self._users)

    def _emoji_candidates(self, query: str) -> list[Candidate]:
        return filter_emojis(query, self._emojis)
