"""
Claude API Client for rating suggestions.
Asks Claude for ratings on platforms the probes could not read.

DESIGN PRINCIPLES:
- Suggestions are candidate facts, never verified ones
- Never invent a platform that was not asked about
- Return nothing rather than something unparseable
"""
import json
import re
from typing import Any, List, Optional, Sequence

import anthropic
from pydantic import ValidationError

from review_radar.config import config
from review_radar.models.rating import PlatformRatingObservation
from review_radar.platforms import find_platform, trust_weight_for
from review_radar.utils.logger import LayerLogger


# System prompt enforcing JSON-only, no-guess answers
SYSTEM_PROMPT = """You are a strict product-review lookup assistant for a rating aggregation system.

You may ONLY report ratings you are confident exist for the exact product named.

ABSOLUTE RULES:
• Never guess a rating or a review count
• Omit a platform entirely if you are unsure
• Ratings are on a 0-5 scale
• Output MUST be a JSON array and nothing else

If you know of no ratings, return EXACTLY:
[]"""

_FENCE_RE = re.compile(r"^```(?:json)?\s*|\s*```$")


def _strip_fences(text: str) -> str:
    return _FENCE_RE.sub("", text.strip())


def _to_count(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return int(value)
    if isinstance(value, str):
        digits = value.replace(",", "").strip()
        return int(digits) if digits.isdigit() else None
    return None


def parse_suggestions(
    raw: Sequence[Any],
    platforms: Optional[Sequence[str]] = None,
) -> List[PlatformRatingObservation]:
    """
    Turn raw suggestion dicts into unverified observations.

    Entries without a platform, with a rating outside 0-5, with an unreadable
    review count, or for a platform that was not asked about are dropped.
    """
    allowed = {p.strip().lower() for p in platforms} if platforms else None
    observations: List[PlatformRatingObservation] = []

    for entry in raw or []:
        if not isinstance(entry, dict):
            continue
        name = entry.get("platform")
        if not isinstance(name, str) or not name.strip():
            continue

        profile = find_platform(name)
        platform = profile.name if profile else name.strip()
        if allowed is not None and platform.lower() not in allowed:
            continue

        review_count = _to_count(entry.get("reviewCount", entry.get("review_count")))
        if review_count is None:
            continue

        try:
            observation = PlatformRatingObservation(
                platform=platform,
                rating=entry.get("rating"),
                review_count=review_count,
                verified=False,
                source_url=entry.get("url") if isinstance(entry.get("url"), str) else None,
                trust_weight=trust_weight_for(platform),
            )
        except ValidationError:
            continue
        observations.append(observation)

    return observations


class ClaudeClient:
    """
    Claude API client for rating suggestions.

    Temperature=0 for deterministic output. Unconfigured clients answer
    every request with an empty list.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        logger: Optional[LayerLogger] = None,
    ):
        self.logger = logger or LayerLogger("claude_client")
        self.model = model or config.CLAUDE_MODEL
        api_key = api_key or config.CLAUDE_API_KEY

        if not api_key:
            self.logger.log_action("init", "skipped", reason="CLAUDE_API_KEY not set")
            self.client = None
        else:
            self.client = anthropic.AsyncAnthropic(api_key=api_key, timeout=config.LLM_TIMEOUT)
            self.logger.log_action("init", "completed", model=self.model)

    def is_available(self) -> bool:
        """Check if Claude client is properly configured."""
        return self.client is not None

    async def suggest_platform_ratings(self, title: str, platforms: Sequence[str]) -> List[dict]:
        """
        Ask for ratings of `title` on each of `platforms`.

        Returns raw dicts ({platform, rating, reviewCount, url}); callers
        validate them with parse_suggestions.
        """
        if not self.client or not title or not platforms:
            return []

        try:
            self.logger.log_action("suggest_ratings", "started", platforms=list(platforms))

            response = await self.client.messages.create(
                model=self.model,
                max_tokens=500,
                temperature=0,
                system=SYSTEM_PROMPT,
                messages=[{
                    "role": "user",
                    "content": f"""Report customer ratings for this product on these platforms.

Platforms: {", ".join(platforms)}

Return a JSON array of objects with keys:
platform, rating, reviewCount, url

Product:
{title[:200]}

JSON:"""
                }]
            )

            text = _strip_fences(response.content[0].text)
            data = json.loads(text)
            if isinstance(data, dict):
                data = data.get("ratings", [])
            if not isinstance(data, list):
                self.logger.log_action("suggest_ratings", "rejected", reason="not_a_list")
                return []

            suggestions = [item for item in data if isinstance(item, dict)]
            self.logger.log_action(
                "suggest_ratings",
                "success",
                suggestions=len(suggestions),
                tokens=response.usage.input_tokens + response.usage.output_tokens
            )
            return suggestions

        except json.JSONDecodeError as e:
            self.logger.log_action("suggest_ratings", "rejected", reason="invalid_json", error=str(e))
            return []
        except Exception as e:
            self.logger.log_error(f"Claude API error: {str(e)}", error_type="api_error")
            return []
