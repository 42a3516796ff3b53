from __future__ import annotations

import json
import re
from typing import Dict, List, Optional
import requests

from ...domain.errors import GenerationError
from ...domain.interfaces import TextGenerator
from ...domain.models import Script
from ..timeouts import http_timeout_seconds
from ..config import ollama_url, generation_model


_JSON_OBJECT = re.compile(r"\{.*\}", re.DOTALL)


def _candidates_prompt(context: Dict[str, object], niche: str, tone: str, directive: Optional[str], count: int) -> str:
    lines = [
        f'You are a viral UGC scriptwriter. Generate exactly {count} different potential "hooks" '
        "(first 3 seconds) for an ad.",
        f"ANALYSIS: {json.dumps(context)}",
        f"NICHE: {niche}",
        f"TONE: {tone}",
    ]
    if directive:
        lines.append(f"USER_DIRECTION: {directive}")
    lines.extend([
        "A great hook is a pattern interrupt, a provocative question, or a shocking statement.",
        'Return JSON format: {"hooks": ["Hook 1", "Hook 2", ...]}',
        "Return ONLY valid JSON.",
    ])
    return "\n".join(lines)


def _script_prompt(
    context: Dict[str, object], niche: str, tone: str, directive: str, style_hint: Optional[str]
) -> str:
    lines = ["You are a viral UGC scriptwriter. Generate a 30-second ad script based on this analysis."]
    if style_hint:
        lines.append(f"### IMPORTANT STYLE GUIDELINE: {style_hint}")
    lines.extend([
        f"ANALYSIS: {json.dumps(context)}",
        f"NICHE: {niche}",
        f"TONE: {tone}",
        f"Rules:\n1. Start with the following hook: {directive}",
        "2. The middle section must show the creator interacting with the product.",
        "3. End with a strong call to action.",
        "Return JSON:",
        '{"hook": "...", "fullScript": "...", '
        '"scenes": [{"time": "0s-5s", "action": "...", "prompt": "..."}]}',
        "Return ONLY valid JSON.",
    ])
    return "\n".join(lines)


class OllamaTextGenerator(TextGenerator):
    """Text-generation adapter for Ollama /api/generate in JSON mode."""

    def _generate_json(self, prompt: str) -> Dict[str, object]:
        url = f"{ollama_url()}/api/generate"
        body = {"model": generation_model(), "prompt": prompt, "format": "json", "stream": False}
        try:
            r = requests.post(url, json=body, timeout=http_timeout_seconds())
            r.raise_for_status()
            text = str((r.json() or {}).get("response") or "")
        except (requests.RequestException, ValueError) as ex:
            raise GenerationError(f"Generation request failed: {type(ex).__name__}: {ex}") from ex
        m = _JSON_OBJECT.search(text)
        if not m:
            raise GenerationError("Generation response did not contain a JSON object")
        try:
            data = json.loads(m.group(0))
        except ValueError as ex:
            raise GenerationError(f"Generation response is not valid JSON: {ex}") from ex
        if not isinstance(data, dict):
            raise GenerationError("Generation response JSON is not an object")
        return data

    def generate_candidates(
        self,
        context: Dict[str, object],
        niche: str,
        tone: str,
        directive: Optional[str] = None,
        count: int = 5,
    ) -> List[str]:
        data = self._generate_json(_candidates_prompt(context, niche, tone, directive, count))
        hooks = data.get("hooks")
        if not isinstance(hooks, list):
            raise GenerationError("Generation response is missing 'hooks'")
        return [str(h) for h in hooks if isinstance(h, str) and h.strip()]

    def generate_final_artifact(
        self,
        context: Dict[str, object],
        niche: str,
        tone: str,
        directive: str,
        style_hint: Optional[str] = None,
    ) -> Script:
        data = self._generate_json(_script_prompt(context, niche, tone, directive, style_hint))
        script = Script.from_dict(data)
        if not script.full_script and not script.scenes:
            raise GenerationError("Generation response contained an empty script")
        return script
