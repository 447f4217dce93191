"""
Stage 5: Company Assistant
==========================
Answers free-text questions about one merged company for the dashboard.

Uses an OpenAI-compatible chat endpoint (OpenRouter by default) when an API
key is configured. Without a key, or when the call fails, a rule-based
answer is built from the merged record; failures are reported on the
result's ``error`` field and never raised.
"""

import logging
import time
from typing import Optional, List

from openai import OpenAI

from ..models.schemas import MergedRecord, AssistantAnswer
from ..config.settings import LLM_CONFIG

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are an expert business analyst and sales intelligence assistant. "
    "You help sales teams with company analysis, outreach strategy and "
    "actionable recommendations. Provide specific insights rather than "
    "restating the data."
)


class CompanyAssistantStage:
    """
    Stage 5: Answer questions about a merged company.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        provider: Optional[str] = None,
        client=None,
    ):
        """
        Initialize LLM client.

        Args:
            api_key: API key for the LLM provider
            provider: "openrouter" or "openai"
            client: Preconfigured chat client (takes precedence)
        """
        self.api_key = api_key or LLM_CONFIG.get("api_key")
        self.provider = provider or LLM_CONFIG.get("provider", "openrouter")
        self.model = LLM_CONFIG.get("model", "openai/gpt-4-turbo")
        self.base_url = LLM_CONFIG.get("base_url", "https://openrouter.ai/api/v1")
        self.site_url = LLM_CONFIG.get("site_url", "http://localhost:8000")
        self.app_name = LLM_CONFIG.get("app_name", "Sales Intelligence Engine")
        self.client = client

        if self.client is None:
            self._initialize_client()

    def _initialize_client(self):
        """Initialize the LLM client based on provider"""
        if not self.api_key:
            return

        if self.provider == "openrouter":
            self.client = OpenAI(
                api_key=self.api_key,
                base_url=self.base_url,
                default_headers={
                    "HTTP-Referer": self.site_url,
                    "X-Title": self.app_name,
                },
            )
        elif self.provider == "openai":
            self.client = OpenAI(api_key=self.api_key)
        else:
            logger.warning("Unknown LLM provider %r; assistant will use rules", self.provider)

    @property
    def llm_enabled(self) -> bool:
        return self.client is not None

    def process(self, record: MergedRecord, question: str) -> AssistantAnswer:
        """
        Answer a question about a merged company.

        Args:
            record: Merged company with its contacts and scores
            question: Free-text question from the user

        Returns:
            AssistantAnswer from the LLM, or from rules on fallback
        """
        start_time = time.time()

        if not self.client:
            return self._generate_rule_based_answer(record, question, start_time)

        try:
            prompt = self._generate_prompt(record, question)
            response = self._call_llm(prompt)
        except Exception as e:
            logger.warning("LLM call failed for %s: %s", record.company.name, e)
            return self._generate_rule_based_answer(
                record, question, start_time, error=f"LLM unavailable: {str(e)[:100]}"
            )

        content = response.choices[0].message.content or ""
        usage = getattr(response, "usage", None)
        processing_time = (time.time() - start_time) * 1000

        return AssistantAnswer(
            company_id=record.company.id,
            company_name=record.company.name,
            question=question,
            answer=content.strip(),
            source="llm",
            processing_time_ms=round(processing_time, 2),
            tokens_used=getattr(usage, "total_tokens", None),
        )

    def _generate_prompt(self, record: MergedRecord, question: str) -> str:
        """Generate the LLM prompt with company context"""
        company = record.company

        company_context = f"""
COMPANY:
- Name: {company.name}
- Industry: {company.industry or 'Unknown'}
- Employees: {company.employee_count or 'Unknown'}
- Founded: {company.founded or 'Unknown'}
- Location: {self._format_location(record) or 'Unknown'}
- Website: {company.website or 'Unknown'}
- Revenue: {company.revenue or 'Unknown'}
- Funding: {company.funding or 'Unknown'}
- Technologies: {', '.join(company.technologies[:10]) if company.technologies else 'Unknown'}
- Description: {(company.description or '')[:500]}
"""

        contact_lines = [
            f"- {c.full_name}, {c.title or 'Unknown title'}"
            f" ({c.seniority.value if c.seniority else 'Unknown seniority'})"
            f"{' [decision maker]' if c.decision_maker else ''}"
            for c in record.contacts[:10]
        ]

        scoring_context = f"""
PRE-COMPUTED ANALYSIS:
- Sales Fit Score: {record.sales_fit_score}/100
- Priority: {record.priority.value}
- Contacts: {record.contact_count} ({record.decision_maker_count} decision makers)
- Average Contact Score: {record.average_contact_score:.0f}
"""

        return f"""Company Data from Internal Database:
{company_context}
CONTACTS:
{chr(10).join(contact_lines) if contact_lines else '- None'}
{scoring_context}
User Question: {question}"""

    def _call_llm(self, prompt: str):
        """Call the chat completions API"""
        return self.client.chat.completions.create(
            model=self.model,
            messages=[
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": prompt},
            ],
            temperature=LLM_CONFIG.get("temperature", 0.7),
            max_tokens=LLM_CONFIG.get("max_tokens", 1000),
        )

    def _generate_rule_based_answer(
        self,
        record: MergedRecord,
        question: str,
        start_time: float,
        error: Optional[str] = None,
    ) -> AssistantAnswer:
        """Answer from the merged record when the LLM is unavailable"""
        q = question.lower()
        parts: List[str] = []

        if any(word in q for word in ("employee", "size", "headcount")):
            parts.append(self._describe_size(record))
        if any(word in q for word in ("industry", "sector")):
            parts.append(f"Industry: {record.company.industry or 'not recorded'}.")
        if any(word in q for word in ("location", "where", "based", "headquarter")):
            location = self._format_location(record)
            parts.append(f"Location: {location}." if location else "Location is not recorded.")
        if any(word in q for word in ("contact", "decision", "who", "people", "ceo")):
            parts.append(self._describe_contacts(record))
        if any(word in q for word in ("score", "fit", "priority", "recommend", "should")):
            parts.append(self._describe_score(record))

        if not parts:
            parts = [self._describe_size(record), self._describe_contacts(record), self._describe_score(record)]

        processing_time = (time.time() - start_time) * 1000

        return AssistantAnswer(
            company_id=record.company.id,
            company_name=record.company.name,
            question=question,
            answer=" ".join(parts),
            source="rules",
            error=error,
            processing_time_ms=round(processing_time, 2),
        )

    def _describe_size(self, record: MergedRecord) -> str:
        count = record.company.employee_count
        if not count:
            return f"{record.company.name} has no employee count on record."
        return f"{record.company.name} has {count:,} employees."

    def _describe_contacts(self, record: MergedRecord) -> str:
        names = ", ".join(
            f"{c.full_name} ({c.title})" if c.title else c.full_name
            for c in record.contacts[:3]
        )
        return (
            f"{record.contact_count} contact(s) on file, "
            f"{record.decision_maker_count} decision maker(s): {names}."
        )

    def _describe_score(self, record: MergedRecord) -> str:
        text = f"Sales fit score {record.sales_fit_score}/100, {record.priority.value} priority."
        b = record.score_breakdown
        if b:
            text += (
                f" Points: size {b.company_size}, decision makers {b.decision_makers},"
                f" email coverage {b.contact_completeness:g}, industry {b.industry},"
                f" geography {b.geography}."
            )
        return text

    def _format_location(self, record: MergedRecord) -> str:
        company = record.company
        return ", ".join(p for p in (company.city, company.state, company.country) if p)
