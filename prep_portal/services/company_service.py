"""
Company Service - the company document store and its save pipeline.

A company is a loosely-typed document: metadata, roles with open-ended
compensation maps, and several content arrays. Two pairs of arrays are
index-aligned (question i <-> solution i):

    onlineQuestions     <-> onlineQuestions_solution
    interviewQuestions  <-> interviewQuestions_solution

In code those pairs are handled as QuestionRecord lists and only split
back into two arrays when the document is written, so the arrays cannot
drift apart.

Every write goes through CompanyService.save():
    migrate legacy fields -> clean content -> normalize CTC -> validate -> upsert
Notifications are NOT sent from here; callers trigger fan-out after the
save returns.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from pydantic import ValidationError as PydanticValidationError
from pymongo import DESCENDING
from pymongo.collection import Collection
from pymongo.database import Database

from prep_portal.core.config import Settings, get_settings
from prep_portal.core.errors import ConflictError, NotFoundError, ValidationError
from prep_portal.db.mongodb import COLLECTIONS, get_collection
from prep_portal.schemas.schemas import CompanyDocument, CompanyStatus
from prep_portal.services import sanitizer
from prep_portal.services.compensation import normalize_roles
from prep_portal.services.mongo_service import parse_object_id, utcnow

logger = logging.getLogger(__name__)

ONLINE_QUESTIONS = "onlineQuestions"
ONLINE_SOLUTIONS = "onlineQuestions_solution"
INTERVIEW_QUESTIONS = "interviewQuestions"
INTERVIEW_SOLUTIONS = "interviewQuestions_solution"
INTERVIEW_PROCESS = "interviewProcess"
MUST_DO_TOPICS = "Must_Do_Topics"

# Older documents stored online solutions under these names
LEGACY_SOLUTION_FIELDS = ("onlineQuestion_solution", "onlineQuestion_solutions")

SOLUTION_SEPARATOR = "\n\n"

MCQ_OPTION_FIELDS = ("optionA", "optionB", "optionC", "optionD", "answer")

PUBLIC_LIST_FIELDS = (
    "name", "type", "eligibility", "roles", "count", "business_model",
    "date_of_visit", "logo", "helpfulCount",
)

# Fields an admin edit may not overwrite directly
PROTECTED_FIELDS = ("_id", "createdAt", "helpfulUsers", "helpfulCount",
                    "difficulty_ratings", "interview_difficulty_level",
                    "difficulty_rating_count")


# ============================================================
# ALIGNED QUESTION/SOLUTION RECORDS
# ============================================================

@dataclass
class QuestionRecord:
    question: str
    solution: str = ""

    def has_solution(self, solution: str) -> bool:
        return solution in self.solution.split(SOLUTION_SEPARATOR)

    def fits(self, solution: str) -> bool:
        """True if `solution` can be appended whole under the solution ceiling."""
        extra = len(SOLUTION_SEPARATOR) if self.solution else 0
        return len(self.solution) + extra + len(solution) <= sanitizer.MAX_SOLUTION

    def add_solution(self, solution: str) -> bool:
        """
        Append `solution` after a blank line. False if nothing changed.
        The combined text is cut to the ceiling; callers that must not lose
        text check fits() first.
        """
        if not solution or self.has_solution(solution):
            return False
        if self.solution:
            self.solution = sanitizer.truncate(
                f"{self.solution}{SOLUTION_SEPARATOR}{solution}", sanitizer.MAX_SOLUTION
            )
        else:
            self.solution = solution
        return True


def load_records(doc: Dict[str, Any], questions_key: str, solutions_key: str) -> List[QuestionRecord]:
    """
    Pair the two arrays by index. Missing solutions become ''; solutions
    with no question are dropped.
    """
    questions = doc.get(questions_key) or []
    solutions = doc.get(solutions_key) or []
    if isinstance(questions, str):
        questions = [questions]
    if isinstance(solutions, str):
        solutions = [solutions]
    if len(solutions) > len(questions):
        logger.warning(
            "Company %s: %d orphan %s entries dropped",
            doc.get("_id"), len(solutions) - len(questions), solutions_key,
        )
    padded = list(solutions[:len(questions)]) + [""] * (len(questions) - len(solutions))
    return [QuestionRecord(q if isinstance(q, str) else str(q or ""),
                           s if isinstance(s, str) else str(s or ""))
            for q, s in zip(questions, padded)]


def store_records(doc: Dict[str, Any], questions_key: str, solutions_key: str,
                  records: List[QuestionRecord]) -> None:
    doc[questions_key] = [r.question for r in records]
    doc[solutions_key] = [r.solution for r in records]


def find_record(records: List[QuestionRecord], question: str) -> Optional[QuestionRecord]:
    for record in records:
        if record.question.strip() == question:
            return record
    return None


def clean_records(records: List[QuestionRecord]) -> List[QuestionRecord]:
    """Sanitize/truncate, drop empty questions, fold duplicates together."""
    cleaned: List[QuestionRecord] = []
    for record in records:
        question = sanitizer.truncate(record.question, sanitizer.MAX_QUESTION)
        if not question:
            continue
        solution = sanitizer.truncate(record.solution, sanitizer.MAX_SOLUTION)
        existing = find_record(cleaned, question)
        if existing:
            existing.add_solution(solution)
        else:
            cleaned.append(QuestionRecord(question, solution))
    return cleaned


# ============================================================
# LEGACY FIELD MIGRATION
# ============================================================

def migrate_legacy_fields(doc: Dict[str, Any]) -> List[str]:
    """
    Bring an old-shaped document up to date, in place.

    - legacy online-solution arrays are copied into onlineQuestions_solution
      when that is empty, then removed
    - a single-string interviewProcess becomes a one-step list

    Returns the names of the fields that were migrated.
    """
    migrated = []
    for legacy in LEGACY_SOLUTION_FIELDS:
        if legacy not in doc:
            continue
        legacy_value = doc.pop(legacy)
        if not doc.get(ONLINE_SOLUTIONS) and legacy_value:
            doc[ONLINE_SOLUTIONS] = list(legacy_value) if isinstance(legacy_value, list) else [legacy_value]
        migrated.append(legacy)

    process = doc.get(INTERVIEW_PROCESS)
    if isinstance(process, str):
        doc[INTERVIEW_PROCESS] = [process] if process.strip() else []
        migrated.append(INTERVIEW_PROCESS)

    if migrated:
        logger.info("Company %s: migrated legacy fields %s", doc.get("_id"), migrated)
    return migrated


# ============================================================
# CONTENT SAFETY NET
# ============================================================

def _clean_text_fields(doc: Dict[str, Any]) -> None:
    for field in ("name", "type", "date_of_visit", "videoKey", "logo"):
        if isinstance(doc.get(field), str):
            doc[field] = sanitizer.sanitize(doc[field])
    if doc.get("eligibility") is not None:
        doc["eligibility"] = sanitizer.truncate(doc["eligibility"], sanitizer.MAX_ELIGIBILITY)
    if doc.get("business_model") is not None:
        doc["business_model"] = sanitizer.truncate(doc["business_model"], sanitizer.MAX_BUSINESS_MODEL)
    if isinstance(doc.get("count"), (int, float)) and not isinstance(doc.get("count"), bool):
        doc["count"] = str(doc["count"])


def _clean_mcqs(mcqs: Any) -> List[Dict[str, Any]]:
    cleaned = []
    for mcq in mcqs or []:
        if not isinstance(mcq, dict):
            continue
        mcq = dict(mcq)
        if mcq.get("question") is not None:
            mcq["question"] = sanitizer.truncate(mcq["question"], sanitizer.MAX_MCQ_QUESTION)
        for field in MCQ_OPTION_FIELDS:
            if mcq.get(field) is not None:
                mcq[field] = sanitizer.truncate(mcq[field], sanitizer.MAX_MCQ_OPTION)
        cleaned.append(mcq)
    return cleaned


def _clean_job_descriptions(jds: Any) -> List[Any]:
    cleaned = []
    for jd in jds or []:
        if isinstance(jd, dict):
            jd = dict(jd)
            if jd.get("title") is not None:
                jd["title"] = sanitizer.truncate(jd["title"], sanitizer.MAX_JD_TITLE)
            if isinstance(jd.get("fileUrl"), str):
                jd["fileUrl"] = jd["fileUrl"].strip()
            if isinstance(jd.get("fileType"), str):
                jd["fileType"] = jd["fileType"].strip().lower()
        cleaned.append(jd)
    return cleaned


def _clean_roles(roles: Any) -> List[Any]:
    cleaned = []
    for role in roles or []:
        if isinstance(role, dict) and isinstance(role.get("roleName"), str):
            role = dict(role)
            role["roleName"] = sanitizer.sanitize(role["roleName"])
        cleaned.append(role)
    return cleaned


def apply_content_limits(doc: Dict[str, Any]) -> None:
    """
    Final pass run on every save: re-sanitize every content field, drop
    empty entries, remove duplicates and cut everything to its ceiling.
    """
    _clean_text_fields(doc)

    online = clean_records(load_records(doc, ONLINE_QUESTIONS, ONLINE_SOLUTIONS))
    store_records(doc, ONLINE_QUESTIONS, ONLINE_SOLUTIONS, online)

    if doc.get(INTERVIEW_SOLUTIONS):
        interview = clean_records(load_records(doc, INTERVIEW_QUESTIONS, INTERVIEW_SOLUTIONS))
        store_records(doc, INTERVIEW_QUESTIONS, INTERVIEW_SOLUTIONS, interview)
    else:
        doc[INTERVIEW_QUESTIONS] = sanitizer.dedupe(
            sanitizer.clean_list(doc.get(INTERVIEW_QUESTIONS), sanitizer.MAX_QUESTION))

    doc[INTERVIEW_PROCESS] = sanitizer.dedupe(
        sanitizer.clean_list(doc.get(INTERVIEW_PROCESS), sanitizer.MAX_PROCESS_STEP))
    doc[MUST_DO_TOPICS] = sanitizer.dedupe(
        sanitizer.clean_list(doc.get(MUST_DO_TOPICS), sanitizer.MAX_TOPIC))

    doc["mcqQuestions"] = _clean_mcqs(doc.get("mcqQuestions"))
    doc["jobDescription"] = _clean_job_descriptions(doc.get("jobDescription"))
    doc["roles"] = _clean_roles(doc.get("roles"))
    doc["helpfulUsers"] = sanitizer.dedupe(doc.get("helpfulUsers") or [])


def recompute_difficulty(doc: Dict[str, Any]) -> None:
    """Mean of the ratings, rounded to 2 places and clamped to [0, 5]."""
    ratings = doc.get("difficulty_ratings") or []
    doc["difficulty_ratings"] = ratings
    doc["difficulty_rating_count"] = len(ratings)
    if ratings:
        mean = sum(ratings) / len(ratings)
        doc["interview_difficulty_level"] = round(min(max(mean, 0.0), 5.0), 2)
    else:
        doc["interview_difficulty_level"] = 0


def validation_errors(doc: Dict[str, Any]) -> Dict[str, str]:
    """Field path -> message for everything CompanyDocument rejects."""
    candidate = {k: v for k, v in doc.items() if not k.startswith("_")}
    try:
        CompanyDocument.model_validate(candidate)
    except PydanticValidationError as exc:
        errors = {}
        for err in exc.errors():
            path = ".".join(str(part) for part in err["loc"]) or "__root__"
            errors.setdefault(path, err["msg"])
        return errors
    return {}


# ============================================================
# COMPANY SERVICE
# ============================================================

class CompanyService:
    """
    Handles company documents.
    All writes go through save(); the rest are reads and small counters.
    """

    def __init__(self, db: Database = None, settings: Settings = None):
        self.collection: Collection = get_collection(COLLECTIONS["companies"], db)
        self.settings = settings or get_settings()

    # ---------------- persistence ----------------

    def save(self, doc: Dict[str, Any]) -> Dict[str, Any]:
        """
        Clean, normalize compensation, validate and write the document.

        Raises ValidationError with field-level detail; nothing is written
        in that case.
        """
        migrate_legacy_fields(doc)
        apply_content_limits(doc)
        recompute_difficulty(doc)
        doc["roles"] = normalize_roles(doc.get("roles"), self.settings.stock_vesting_years)

        errors = validation_errors(doc)
        if errors:
            logger.warning("Company %s failed validation: %s", doc.get("_id"), errors)
            raise ValidationError(errors)

        now = utcnow()
        doc.setdefault("createdAt", now)
        doc["updatedAt"] = now
        if "_id" in doc:
            self.collection.replace_one({"_id": doc["_id"]}, doc, upsert=True)
        else:
            result = self.collection.insert_one(doc)
            doc["_id"] = result.inserted_id
        return doc

    def create(self, payload: Dict[str, Any], submitter: Dict[str, str]) -> Dict[str, Any]:
        """Student-submitted company; always starts out pending."""
        doc = {k: v for k, v in payload.items() if k not in PROTECTED_FIELDS}
        doc.update({
            "status": CompanyStatus.pending.value,
            "submittedBy": {"name": submitter.get("name"), "email": submitter.get("email")},
            "helpfulCount": 0,
            "helpfulUsers": [],
            "difficulty_ratings": [],
        })
        saved = self.save(doc)
        logger.info("Company %s submitted by %s", saved["_id"], submitter.get("email"))
        return saved

    def update(self, company_id: str, patch: Dict[str, Any]) -> Dict[str, Any]:
        """Admin edit: overlay `patch` and run the full save pipeline."""
        doc = self.get(company_id)
        for key, value in patch.items():
            if key not in PROTECTED_FIELDS:
                doc[key] = value
        return self.save(doc)

    def approve(self, company_id: str) -> Tuple[Dict[str, Any], bool]:
        """Returns (company, was_already_approved)."""
        doc = self.get(company_id)
        already = doc.get("status") == CompanyStatus.approved.value
        doc["status"] = CompanyStatus.approved.value
        saved = self.save(doc)
        logger.info("Company %s approved", saved["_id"])
        return saved, already

    def reject(self, company_id: str) -> None:
        """Rejection is a hard delete."""
        oid = self._oid(company_id)
        result = self.collection.delete_one({"_id": oid})
        if result.deleted_count == 0:
            raise NotFoundError("Company not found")
        logger.info("Company %s rejected and deleted", company_id)

    # ---------------- reads ----------------

    def _oid(self, company_id: Any):
        oid = parse_object_id(company_id)
        if oid is None:
            raise NotFoundError("Company not found")
        return oid

    def get(self, company_id: Any) -> Dict[str, Any]:
        doc = self.collection.find_one({"_id": self._oid(company_id)})
        if not doc:
            raise NotFoundError("Company not found")
        return doc

    def get_approved(self, company_id: Any) -> Dict[str, Any]:
        doc = self.collection.find_one({"_id": self._oid(company_id), "status": CompanyStatus.approved.value})
        if not doc:
            raise NotFoundError("Company not found")
        return doc

    def list_approved(self, company_type: str = None, business_model: str = None,
                      limit: int = 0, offset: int = 0) -> List[Dict[str, Any]]:
        query: Dict[str, Any] = {"status": CompanyStatus.approved.value}
        if company_type:
            query["type"] = company_type
        if business_model:
            query["business_model"] = business_model
        cursor = self.collection.find(query, {f: 1 for f in PUBLIC_LIST_FIELDS}).sort("name", 1)
        if offset:
            cursor = cursor.skip(offset)
        if limit:
            cursor = cursor.limit(limit)
        return list(cursor)

    def list_by_status(self, status: str) -> List[Dict[str, Any]]:
        return list(self.collection.find({"status": status}).sort("createdAt", DESCENDING))

    def names_by_id(self, ids: List[Any]) -> Dict[Any, str]:
        if not ids:
            return {}
        cursor = self.collection.find({"_id": {"$in": list(ids)}}, {"name": 1})
        return {doc["_id"]: doc.get("name") for doc in cursor}

    def stats(self) -> Dict[str, int]:
        return {
            "approved": self.collection.count_documents({"status": CompanyStatus.approved.value}),
            "pending": self.collection.count_documents({"status": CompanyStatus.pending.value}),
        }

    # ---------------- votes & ratings ----------------

    def upvote(self, company_id: str, user_email: str) -> int:
        """One helpful vote per user. Returns the new helpfulCount."""
        doc = self.get_approved(company_id)
        email = (user_email or "").strip().lower()
        if not email:
            raise ValidationError({"email": "User email is required to vote"})
        if email in (doc.get("helpfulUsers") or []):
            raise ConflictError("You have already marked this company as helpful")

        result = self.collection.update_one(
            {"_id": doc["_id"], "helpfulUsers": {"$ne": email}},
            {"$push": {"helpfulUsers": email}, "$inc": {"helpfulCount": 1}},
        )
        if result.modified_count == 0:
            raise ConflictError("You have already marked this company as helpful")
        return int(doc.get("helpfulCount") or 0) + 1

    def rate_difficulty(self, company_id: str, rating: Any) -> Dict[str, Any]:
        """Append a 1-5 rating and refresh the mean/count."""
        if isinstance(rating, bool) or not isinstance(rating, int) or not 1 <= rating <= 5:
            raise ValidationError({"rating": "Rating must be an integer between 1 and 5"})
        doc = self.get_approved(company_id)
        doc["difficulty_ratings"] = list(doc.get("difficulty_ratings") or []) + [rating]
        recompute_difficulty(doc)
        fields = {
            "difficulty_ratings": doc["difficulty_ratings"],
            "interview_difficulty_level": doc["interview_difficulty_level"],
            "difficulty_rating_count": doc["difficulty_rating_count"],
        }
        self.collection.update_one({"_id": doc["_id"]}, {"$set": fields})
        return fields
