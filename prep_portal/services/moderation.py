"""
Moderation Merger - folds an approved submission into its company.

Flow for approve(submission_id):
1. load the submission (must still be pending) and its company
2. migrate legacy fields on the company document
3. merge the content into the field for the submission type
4. save the company (clean-up pass, validation, CTC normalization)
5. only then mark the submission approved

If step 4 raises ValidationError the submission stays pending so the
admin can inspect the error and retry or reject.

There is no document locking: two approvals for the same company at the
same moment can lose one of the updates.
"""

import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, Tuple

from prep_portal.core.errors import ConflictError, ValidationError
from prep_portal.schemas.schemas import SubmissionStatus, SubmissionType
from prep_portal.services import sanitizer
from prep_portal.services.company_service import (
    INTERVIEW_PROCESS,
    INTERVIEW_QUESTIONS,
    INTERVIEW_SOLUTIONS,
    MUST_DO_TOPICS,
    ONLINE_QUESTIONS,
    ONLINE_SOLUTIONS,
    CompanyService,
    QuestionRecord,
    find_record,
    load_records,
    migrate_legacy_fields,
    store_records,
)
from prep_portal.services.submission_service import SubmissionService

logger = logging.getLogger(__name__)

ADDED = "added"
MERGED = "merged"
DUPLICATE = "duplicate"


@dataclass
class MergeResult:
    company: Dict[str, Any]
    outcome: str
    field: str


def parse_content(content: str) -> Tuple[str, str]:
    """
    Split submission content into (question, solution).

    JSON objects supply `question` (or `content`) and `solution`; anything
    that is not a JSON object is the question itself with no solution.
    """
    try:
        parsed = json.loads(content)
    except (TypeError, ValueError):
        return content, ""
    if isinstance(parsed, dict):
        question = parsed.get("question") or parsed.get("content") or ""
        solution = parsed.get("solution") or ""
        return (question if isinstance(question, str) else str(question),
                solution if isinstance(solution, str) else str(solution))
    if isinstance(parsed, str):
        return parsed, ""
    return content, ""


def _append_unique(doc: Dict[str, Any], field: str, value: str) -> str:
    values = doc.get(field) or []
    if isinstance(values, str):
        values = [values]
    values = [v.strip() if isinstance(v, str) else v for v in values]
    if value in values:
        doc[field] = values
        return DUPLICATE
    doc[field] = values + [value]
    return ADDED


def merge_online_question(doc: Dict[str, Any], question: str, solution: str) -> str:
    """
    Known question: the new solution is appended to its existing solution.
    New question: appended together with its solution ('' if none).

    Raises ValidationError when the appended solution would not fit under
    the solution ceiling.
    """
    records = load_records(doc, ONLINE_QUESTIONS, ONLINE_SOLUTIONS)
    existing = find_record(records, question)
    if existing and solution and not existing.has_solution(solution) and not existing.fits(solution):
        raise ValidationError({
            "content": f"Solution does not fit: the combined solution would exceed "
                       f"{sanitizer.MAX_SOLUTION} characters"
        })
    if existing:
        outcome = MERGED if existing.add_solution(solution) else DUPLICATE
    else:
        records.append(QuestionRecord(question, solution))
        outcome = ADDED
    store_records(doc, ONLINE_QUESTIONS, ONLINE_SOLUTIONS, records)
    return outcome


def merge_interview_question(doc: Dict[str, Any], question: str) -> str:
    if doc.get(INTERVIEW_SOLUTIONS):
        # keep the optional solution array aligned too
        records = load_records(doc, INTERVIEW_QUESTIONS, INTERVIEW_SOLUTIONS)
        if find_record(records, question):
            return DUPLICATE
        records.append(QuestionRecord(question))
        store_records(doc, INTERVIEW_QUESTIONS, INTERVIEW_SOLUTIONS, records)
        return ADDED
    return _append_unique(doc, INTERVIEW_QUESTIONS, question)


def merge_submission(doc: Dict[str, Any], submission_type: str, content: str) -> Tuple[str, str]:
    """
    Merge one piece of content into `doc` in place.
    Returns (outcome, field).
    """
    raw_question, raw_solution = parse_content(content)

    if submission_type == SubmissionType.online_questions.value:
        field, limit = ONLINE_QUESTIONS, sanitizer.MAX_QUESTION
    elif submission_type == SubmissionType.interview_questions.value:
        field, limit = INTERVIEW_QUESTIONS, sanitizer.MAX_QUESTION
    elif submission_type == SubmissionType.interview_process.value:
        field, limit = INTERVIEW_PROCESS, sanitizer.MAX_PROCESS_STEP
    elif submission_type == SubmissionType.must_do_topics.value:
        field, limit = MUST_DO_TOPICS, sanitizer.MAX_TOPIC
    else:
        raise ValidationError({"type": f"Unknown submission type '{submission_type}'"})

    value = sanitizer.truncate(raw_question, limit)
    if not value:
        raise ValidationError({"content": "Submission content is empty after sanitizing"})

    if field == ONLINE_QUESTIONS:
        solution = sanitizer.truncate(raw_solution, sanitizer.MAX_SOLUTION)
        return merge_online_question(doc, value, solution), field
    if field == INTERVIEW_QUESTIONS:
        return merge_interview_question(doc, value), field
    return _append_unique(doc, field, value), field


class ModerationMerger:
    """Given its stores at construction; holds no other state."""

    def __init__(self, companies: CompanyService, submissions: SubmissionService):
        self.companies = companies
        self.submissions = submissions

    def approve(self, submission_id: str) -> MergeResult:
        submission = self.submissions.get(submission_id)
        if submission.get("status") == SubmissionStatus.approved.value:
            raise ConflictError("Submission already approved")

        company = self.companies.get(submission["companyId"])
        migrate_legacy_fields(company)

        outcome, field = merge_submission(company, submission["type"], submission["content"])
        logger.info("Submission %s -> company %s.%s: %s",
                    submission["_id"], company["_id"], field, outcome)

        saved = self.companies.save(company)
        self.submissions.mark_approved(submission["_id"])
        return MergeResult(company=saved, outcome=outcome, field=field)

    def reject(self, submission_id: str) -> None:
        self.submissions.reject(submission_id)
