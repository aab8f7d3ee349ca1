"""
Google Gemini client for the TACTIX collaborators: matchup analysis,
screenshot scanning, document extraction, coaching guides and match
simulation.

Every request asks for JSON shaped like a pydantic response model. Any
failure (transport, HTTP status, empty or malformed output) surfaces as
GeminiError; there are no retries at this layer.
"""
from __future__ import annotations

import json
import logging
import time
from typing import Any, Dict, List, Optional, Tuple, Type, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from domain import prompts
from domain.models import KnowledgeInsight, Language, ScanResult, TeamRecord
from domain.reports import (
    AnalysisReport,
    DocumentExtraction,
    LineTactics,
    SimulationResult,
    TacticalSettings,
    TutorialGuide,
)
from services.config import Settings, get_settings

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


class GeminiError(Exception):
    """Error from the Gemini API or an unusable response."""

    pass


def image_part(base64_image: str, mime_type: str = "image/jpeg") -> Dict[str, Any]:
    return {"inlineData": {"mimeType": mime_type, "data": base64_image}}


def text_part(text: str) -> Dict[str, Any]:
    return {"text": text}


class TactixClient:
    """Synchronous client for the Gemini generateContent endpoint."""

    def __init__(self, settings: Optional[Settings] = None, http_client: Optional[httpx.Client] = None):
        settings = settings or get_settings()
        self.api_key = (settings.GEMINI_API_KEY or "").strip()
        self.base_url = settings.GEMINI_BASE_URL.rstrip("/")
        self.pro_model = settings.GEMINI_PRO_MODEL
        self.flash_model = settings.GEMINI_FLASH_MODEL
        self.timeout = settings.GEMINI_TIMEOUT_SECONDS
        self.thinking_budget = settings.GEMINI_THINKING_BUDGET

        self._client: Optional[httpx.Client] = http_client

    def _get_client(self) -> httpx.Client:
        """Get or create HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.Client(
                timeout=httpx.Timeout(self.timeout),
                headers={"Content-Type": "application/json"},
            )
        return self._client

    def close(self) -> None:
        """Close HTTP client."""
        if self._client is not None and not self._client.is_closed:
            self._client.close()
        self._client = None

    def _generate(
        self,
        model: str,
        system_instruction: str,
        parts: List[Dict[str, Any]],
        response_model: Type[BaseModel],
        empty_message: str,
        temperature: Optional[float] = None,
        thinking: bool = False,
    ) -> Dict[str, Any]:
        """POST one generateContent request and return the decoded JSON object."""
        if not self.api_key:
            raise GeminiError("API Key is missing. Please check your environment variables.")

        generation_config: Dict[str, Any] = {
            "responseMimeType": "application/json",
            "responseJsonSchema": response_model.model_json_schema(),
        }
        if temperature is not None:
            generation_config["temperature"] = temperature
        if thinking and self.thinking_budget:
            generation_config["thinkingConfig"] = {"thinkingBudget": self.thinking_budget}

        payload = {
            "contents": [{"role": "user", "parts": parts}],
            "systemInstruction": {"parts": [text_part(system_instruction)]},
            "generationConfig": generation_config,
        }
        url = f"{self.base_url}/{model}:generateContent"

        start_time = time.time()
        try:
            response = self._get_client().post(url, json=payload, headers={"x-goog-api-key": self.api_key})
        except httpx.TimeoutException as e:
            elapsed_ms = int((time.time() - start_time) * 1000)
            logger.error(f"Gemini API timeout after {elapsed_ms}ms ({model})")
            raise GeminiError("Request timed out") from e
        except httpx.HTTPError as e:
            logger.error(f"Gemini API transport error ({model}): {e}")
            raise GeminiError(f"Request failed: {e}") from e

        elapsed_ms = int((time.time() - start_time) * 1000)
        if response.status_code != 200:
            error_text = response.text[:500]
            logger.error(f"Gemini API error {response.status_code} ({model}): {error_text}")
            raise GeminiError(f"HTTP {response.status_code}: {error_text}")

        try:
            data = response.json()
        except ValueError as e:
            raise GeminiError("Gemini returned a non-JSON envelope") from e

        text, finish_reason = self._extract_text_and_reason(data)
        if finish_reason and finish_reason != "STOP":
            logger.warning(f"Gemini finishReason={finish_reason} ({model}, text_len={len(text)})")
        if not text:
            raise GeminiError(empty_message)

        try:
            decoded = json.loads(text)
        except json.JSONDecodeError as e:
            logger.error(f"Gemini returned invalid JSON ({model}): {text[:200]}")
            raise GeminiError(f"{empty_message} (invalid JSON)") from e
        if decoded is None:
            decoded = {}
        if not isinstance(decoded, dict):
            raise GeminiError(f"{empty_message} (unexpected payload)")

        logger.info(f"Gemini {model} responded in {elapsed_ms}ms")
        return decoded

    def _extract_text_and_reason(self, response: Dict[str, Any]) -> Tuple[str, Optional[str]]:
        """Extract text and finishReason from Gemini response."""
        candidates = response.get("candidates") or []
        if not candidates:
            return "", None

        candidate = candidates[0]
        finish_reason = candidate.get("finishReason")
        parts = (candidate.get("content") or {}).get("parts") or []
        text = "".join(p.get("text", "") for p in parts if not p.get("thought"))
        return text.strip(), finish_reason

    @staticmethod
    def _parse(model_cls: Type[ModelT], data: Dict[str, Any], what: str) -> ModelT:
        try:
            return model_cls.model_validate(data)
        except ValidationError as e:
            logger.error(f"{what} response failed validation: {e}")
            raise GeminiError(f"{what} response was incomplete") from e

    def analyze_matchup(
        self,
        my_team: TeamRecord,
        opponent: TeamRecord,
        knowledge_context: Optional[List[str]] = None,
        language: Language = Language.EN,
        notes: str = "",
    ) -> AnalysisReport:
        prompt = prompts.analysis_prompt(my_team, opponent, knowledge_context or [], language, notes)
        data = self._generate(
            self.pro_model,
            prompts.TACTIX_SYSTEM_IDENTITY,
            [text_part(prompt)],
            AnalysisReport,
            "No response from TACTIX AI",
            thinking=True,
        )
        return self._parse(AnalysisReport, data, "Tactical analysis")

    def scan_screenshot(self, base64_image: str, mime_type: str = "image/jpeg") -> ScanResult:
        """Read team fields from a screenshot. An all-null result is valid."""
        data = self._generate(
            self.flash_model,
            prompts.VISION_SCOUT_IDENTITY,
            [image_part(base64_image, mime_type), text_part(prompts.SCAN_INSTRUCTION)],
            ScanResult,
            "Vision Scout failed to extract data.",
            temperature=0.1,
        )
        return self._parse(ScanResult, data, "Screenshot scan")

    def process_document(self, base64_image: str, filename: str, mime_type: str = "image/jpeg") -> KnowledgeInsight:
        data = self._generate(
            self.flash_model,
            prompts.DOCMASTER_IDENTITY,
            [image_part(base64_image, mime_type), text_part(prompts.DOCUMENT_INSTRUCTION)],
            DocumentExtraction,
            "DocMaster failed to process document.",
            temperature=0.2,
        )
        extraction = self._parse(DocumentExtraction, data, "Document")
        # id and createdAt are assigned locally
        return KnowledgeInsight(
            filename=filename,
            documentType=extraction.type,
            keyInsights=extraction.keyInsights,
            tacticalRules=extraction.tacticalRules,
        )

    def generate_coaching_guide(
        self,
        report: AnalysisReport,
        knowledge_context: Optional[List[str]] = None,
        language: Language = Language.EN,
    ) -> TutorialGuide:
        prompt = prompts.coaching_prompt(report.model_dump(mode="json"), knowledge_context or [], language)
        data = self._generate(
            self.flash_model,
            prompts.COACH_ALPHA_IDENTITY,
            [text_part(prompt)],
            TutorialGuide,
            "Coach Alpha is offline.",
            temperature=0.7,
        )
        return self._parse(TutorialGuide, data, "Coaching guide")

    def run_simulation(
        self,
        my_team: TeamRecord,
        opponent: TeamRecord,
        settings: TacticalSettings,
        line_tactics: LineTactics,
        language: Language = Language.EN,
    ) -> SimulationResult:
        prompt = prompts.simulation_prompt(
            my_team,
            opponent,
            settings.model_dump(mode="json"),
            line_tactics.model_dump(mode="json"),
            language,
        )
        data = self._generate(
            self.pro_model,
            prompts.SIMULATION_ENGINE_IDENTITY,
            [text_part(prompt)],
            SimulationResult,
            "Simulation Engine offline.",
            thinking=True,
        )
        return self._parse(SimulationResult, data, "Simulation")
