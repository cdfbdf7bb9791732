"""
JSON Parser utility for extracting JSON from LLM responses.
"""
import json
import logging
import re
from typing import Any, Dict

from src.orchestrator.errors import MalformedModelOutput

logger = logging.getLogger(__name__)

_CODE_BLOCK = re.compile(r"```(?:json)?\s*(.*?)\s*```", re.DOTALL | re.IGNORECASE)


class JSONParser:
    """Helper class to extract clean JSON objects from LLM responses."""

    @staticmethod
    def extract_json(text: str) -> Dict[str, Any]:
        """Extract the first JSON object from ``text``.

        Tries, in order: the whole text, each fenced code block, then every
        balanced ``{...}`` span found by scanning the text.

        Raises:
            MalformedModelOutput: If no JSON object can be recovered.
        """
        if not text or not text.strip():
            raise MalformedModelOutput("Model returned an empty response")

        candidates = [text.strip()]
        candidates.extend(m.group(1) for m in _CODE_BLOCK.finditer(text))

        for candidate in candidates:
            parsed = JSONParser._loads_object(candidate)
            if parsed is not None:
                return parsed

        for span in JSONParser.iter_object_spans(text):
            parsed = JSONParser._loads_object(span)
            if parsed is not None:
                return parsed

        logger.warning("JSONParser: could not extract JSON (first 200 chars): %s", text[:200])
        raise MalformedModelOutput("Could not extract a JSON object from the model response")

    @staticmethod
    def iter_object_spans(text: str):
        """Yield substrings that form brace-balanced objects, outermost first.

        Braces inside JSON string literals are ignored.
        """
        start = text.find("{")
        while start != -1:
            depth = 0
            in_string = False
            escaped = False
            end = None
            for i in range(start, len(text)):
                ch = text[i]
                if in_string:
                    if escaped:
                        escaped = False
                    elif ch == "\\":
                        escaped = True
                    elif ch == '"':
                        in_string = False
                    continue
                if ch == '"':
                    in_string = True
                elif ch == "{":
                    depth += 1
                elif ch == "}":
                    depth -= 1
                    if depth == 0:
                        end = i
                        break
            if end is not None:
                yield text[start : end + 1]
            start = text.find("{", start + 1)

    @staticmethod
    def _loads_object(candidate: str) -> Dict[str, Any] | None:
        try:
            value = json.loads(candidate)
        except (json.JSONDecodeError, TypeError):
            return None
        return value if isinstance(value, dict) else None
