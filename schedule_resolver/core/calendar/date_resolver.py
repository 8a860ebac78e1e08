"""
DateExpressionResolver - Turns user-typed date strings into calendar dates

Handles inputs like:
- "today", "tomorrow"
- "17-20" (the 17th through the 20th of the current month)
- "20-10" (DD-MM), "05-12-2025" (DD-MM-YYYY)
- "Nov 17", "17th of november"
- "2025-11-17"
- "meeting on the 21st"

Resolution is an ordered chain of strategies. Each strategy either claims
the input or declines, and the first claim wins. Input nothing claims ends
in a clarification result instead of an exception.
"""
import re
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Any, Callable, Dict, List, Optional, Union

import pytz

from ...utils.config import Config
from ...utils.datetime import build_date, is_valid_day, last_day_of_month, parse_iso_date
from ...utils.logger import setup_logger
from .models import ResolutionContext, ResolutionMethod, ResolutionResult
from .utils import get_user_timezone, get_utc_now, parse_reference_date

logger = setup_logger(__name__)

YEAR_PREFIX_PATTERN = re.compile(r'^\d{4}')
DDMM_PATTERN = re.compile(r'^(\d{1,2})\s*-\s*(\d{1,2})$')
DDMMYYYY_PATTERN = re.compile(r'^(\d{1,2})\s*-\s*(\d{1,2})\s*-\s*(\d{4})$')
DAY_NUMBER_PATTERN = re.compile(r'(?<!\d)(\d{1,2})(?!\d)')
ANY_NUMBER_PATTERN = re.compile(r'\d+')

# Full names first so "march" is reported rather than "mar"
MONTH_NAMES = {
    'january': 1, 'jan': 1,
    'february': 2, 'feb': 2,
    'march': 3, 'mar': 3,
    'april': 4, 'apr': 4,
    'may': 5,
    'june': 6, 'jun': 6,
    'july': 7, 'jul': 7,
    'august': 8, 'aug': 8,
    'september': 9, 'sep': 9,
    'october': 10, 'oct': 10,
    'november': 11, 'nov': 11,
    'december': 12, 'dec': 12
}

Clock = Callable[[], datetime]


@dataclass(frozen=True)
class Resolution:
    """What a strategy returns when it claims an input."""
    date: date
    method: ResolutionMethod
    description: str
    end_date: Optional[date] = None


@dataclass(frozen=True)
class ResolutionStrategy:
    """
    One link in the chain.

    ``applies`` is a cheap shape test; ``handle`` may still decline by
    returning None (e.g. "25-18" looks like DD-MM but 18 isn't a month).
    """
    name: str
    applies: Callable[[str], bool]
    handle: Callable[[str, date], Optional[Resolution]]


class DateExpressionResolver:
    """
    Resolve raw date strings against a reference date.

    The resolver holds no per-call state: the same raw string, context and
    reference date always produce the same result. ``clock`` only supplies
    the reference date when the caller doesn't, plus the result timestamp.
    """

    def __init__(self, config: Optional[Config] = None, clock: Optional[Clock] = None):
        self.config = config or Config()
        self.clock = clock or get_utc_now
        self.timezone = get_user_timezone(self.config)
        self.strategies: List[ResolutionStrategy] = self._build_strategies()

    def _build_strategies(self) -> List[ResolutionStrategy]:
        """The chain, in priority order."""
        return [
            ResolutionStrategy('relative', self._is_relative, self._resolve_relative),
            ResolutionStrategy('day_range', self._looks_like_range, self._resolve_day_range),
            ResolutionStrategy('malformed_ddmm', self._looks_like_ddmm, self._resolve_ddmm),
            ResolutionStrategy('malformed_ddmmyyyy', self._looks_like_ddmmyyyy, self._resolve_ddmmyyyy),
            ResolutionStrategy('natural_language', self._mentions_month, self._resolve_natural_language),
            ResolutionStrategy('iso_standard', self._looks_like_iso, self._resolve_iso),
            ResolutionStrategy('extracted_day', self._has_number, self._resolve_extracted_day),
        ]

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def resolve(
        self,
        raw: Any,
        context: Union[ResolutionContext, Dict[str, Any], None] = None,
        reference_date: Union[date, datetime, str, None] = None
    ) -> ResolutionResult:
        """
        Resolve a raw date string.

        Args:
            raw: Date string from user input (anything else is treated as empty)
            context: Optional hints, e.g. {"eventTitle": "Dentist"}
            reference_date: "Today" for the purposes of this call; defaults to
                the clock's date in the configured timezone

        Returns:
            ResolutionResult; never raises for any ``raw``
        """
        ctx = ResolutionContext.from_value(context)
        today = self._reference_date(reference_date)

        if not raw or not isinstance(raw, str) or not raw.strip():
            fallback = parse_iso_date(self.config.resolver.fallback_date) or today
            return self._build_result(
                Resolution(fallback, ResolutionMethod.DEFAULT, 'No date provided'), ctx
            )

        text = raw.strip()

        for strategy in self.strategies:
            if not strategy.applies(text):
                continue
            resolution = strategy.handle(text, today)
            if resolution is not None:
                logger.debug(
                    "date_resolved",
                    raw=raw,
                    strategy=strategy.name,
                    method=resolution.method.value,
                    date=resolution.date.isoformat()
                )
                return self._build_result(resolution, ctx)

        logger.info("date_needs_clarification", raw=raw, event_title=ctx.event_title)
        return self._build_result(
            Resolution(
                today,
                ResolutionMethod.FALLBACK_WITH_CLARIFICATION,
                'Unable to parse date - needs clarification'
            ),
            ctx,
            clarification_message=self.clarification_message(text, ctx)
        )

    @staticmethod
    def clarification_message(raw: str, context: ResolutionContext) -> str:
        """Build the user-facing message asking for a clearer date."""
        parts = [
            f'I couldn\'t reliably parse "{raw}" as a date.',
            'Please provide the date in YYYY-MM-DD format.',
        ]
        if context.event_title:
            parts.append(f'For your event: "{context.event_title}"')
        return ' '.join(parts)

    # ------------------------------------------------------------------
    # Strategies
    # ------------------------------------------------------------------

    @staticmethod
    def _is_relative(text: str) -> bool:
        return text.lower() in ('today', 'tomorrow')

    @staticmethod
    def _resolve_relative(text: str, today: date) -> Optional[Resolution]:
        if text.lower() == 'today':
            return Resolution(today, ResolutionMethod.RELATIVE_TODAY, 'Relative date - today')
        return Resolution(
            today + timedelta(days=1),
            ResolutionMethod.RELATIVE_TOMORROW,
            'Relative date - tomorrow'
        )

    @staticmethod
    def _looks_like_range(text: str) -> bool:
        return '-' in text and not YEAR_PREFIX_PATTERN.match(text)

    @staticmethod
    def _resolve_day_range(text: str, today: date) -> Optional[Resolution]:
        """Day range: "17-20" is the 17th through the 20th of the current month."""
        parts = [part.strip() for part in text.split('-')]
        if len(parts) != 2 or not all(part.isdigit() for part in parts):
            return None

        first, second = int(parts[0]), int(parts[1])
        if not (is_valid_day(first) and is_valid_day(second) and first < second):
            return None

        start = build_date(today.year, today.month, first)
        if start is None:
            return None

        # "25-31" in a 30-day month ends on the 30th
        end = date(today.year, today.month, min(second, last_day_of_month(today.year, today.month)))

        logger.info("date_range_detected", raw=text, start=start.isoformat(), end=end.isoformat())
        return Resolution(
            start,
            ResolutionMethod.DATE_RANGE_DETECTED,
            f'Date range {text} interpreted as {start.isoformat()} to {end.isoformat()}',
            end_date=end
        )

    @staticmethod
    def _looks_like_ddmm(text: str) -> bool:
        return DDMM_PATTERN.match(text) is not None

    def _resolve_ddmm(self, text: str, today: date) -> Optional[Resolution]:
        match = DDMM_PATTERN.match(text)
        first, second = int(match.group(1)), int(match.group(2))

        corrected_day = self.config.resolver.malformed_corrections.get(f'{first}-{second}')
        if corrected_day is not None:
            corrected = build_date(today.year, today.month, corrected_day)
            if corrected is not None:
                return Resolution(
                    corrected,
                    ResolutionMethod.MALFORMED_SPECIAL_CASE,
                    'Special malformed date fixed'
                )

        if is_valid_day(first) and is_valid_day(second):
            resolved = build_date(today.year, second, first)
            if resolved is not None:
                return Resolution(
                    resolved,
                    ResolutionMethod.MALFORMED_DDMM_FIXED,
                    'Malformed date interpreted as DD-MM'
                )

        return None

    @staticmethod
    def _looks_like_ddmmyyyy(text: str) -> bool:
        return DDMMYYYY_PATTERN.match(text) is not None

    def _resolve_ddmmyyyy(self, text: str, today: date) -> Optional[Resolution]:
        match = DDMMYYYY_PATTERN.match(text)
        day, month, year = int(match.group(1)), int(match.group(2)), int(match.group(3))

        resolver_config = self.config.resolver
        if not (resolver_config.min_year <= year <= resolver_config.max_year):
            return None

        resolved = build_date(year, month, day)
        if resolved is None:
            return None

        return Resolution(
            resolved,
            ResolutionMethod.MALFORMED_DDMMYYYY_FIXED,
            'Malformed date interpreted as DD-MM-YYYY'
        )

    @staticmethod
    def _mentions_month(text: str) -> bool:
        lowered = text.lower()
        return any(name in lowered for name in MONTH_NAMES)

    @staticmethod
    def _resolve_natural_language(text: str, today: date) -> Optional[Resolution]:
        lowered = text.lower()
        day_match = DAY_NUMBER_PATTERN.search(text)
        if not day_match:
            return None

        day = int(day_match.group(1))
        if not is_valid_day(day):
            return None

        for month_name, month_num in MONTH_NAMES.items():
            if month_name not in lowered:
                continue
            resolved = build_date(today.year, month_num, day)
            if resolved is not None:
                return Resolution(
                    resolved,
                    ResolutionMethod.NATURAL_LANGUAGE,
                    f'Natural language date with {month_name}'
                )

        return None

    @staticmethod
    def _looks_like_iso(text: str) -> bool:
        return parse_iso_date(text) is not None

    @staticmethod
    def _resolve_iso(text: str, today: date) -> Optional[Resolution]:
        return Resolution(parse_iso_date(text), ResolutionMethod.VALID_STANDARD, 'Valid standard date format')

    @staticmethod
    def _has_number(text: str) -> bool:
        return ANY_NUMBER_PATTERN.search(text) is not None

    @staticmethod
    def _resolve_extracted_day(text: str, today: date) -> Optional[Resolution]:
        day = int(ANY_NUMBER_PATTERN.search(text).group(0))
        if not is_valid_day(day):
            return None

        resolved = build_date(today.year, today.month, day)
        if resolved is None:
            return None

        return Resolution(resolved, ResolutionMethod.EXTRACTED_DAY, 'Day extracted from text')

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _reference_date(self, reference_date: Union[date, datetime, str, None]) -> date:
        if reference_date is not None:
            return parse_reference_date(reference_date)
        return self.clock().astimezone(pytz.timezone(self.timezone)).date()

    def _timestamp(self) -> str:
        now = self.clock().astimezone(pytz.UTC)
        return now.isoformat(timespec='milliseconds').replace('+00:00', 'Z')

    def _build_result(
        self,
        resolution: Resolution,
        context: ResolutionContext,
        clarification_message: Optional[str] = None
    ) -> ResolutionResult:
        needs_clarification = clarification_message is not None
        return ResolutionResult(
            date=resolution.date.isoformat(),
            end_date=resolution.end_date.isoformat() if resolution.end_date else None,
            is_range=resolution.end_date is not None,
            method=resolution.method,
            description=resolution.description,
            needs_clarification=needs_clarification,
            clarification_message=clarification_message,
            context=context,
            timestamp=self._timestamp(),
        )


_default_resolver: Optional[DateExpressionResolver] = None


def get_resolver() -> DateExpressionResolver:
    """Get or create the shared resolver (lazy initialization)."""
    global _default_resolver
    if _default_resolver is None:
        _default_resolver = DateExpressionResolver()
    return _default_resolver


def resolve(
    raw: Any,
    context: Union[ResolutionContext, Dict[str, Any], None] = None,
    reference_date: Union[date, datetime, str, None] = None
) -> ResolutionResult:
    """Resolve ``raw`` with the shared resolver."""
    return get_resolver().resolve(raw, context, reference_date)
