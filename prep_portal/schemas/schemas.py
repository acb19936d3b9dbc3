"""
Pydantic Schemas - Request/Response Validation

All API request/response schemas plus the permissive model a company
document is checked against before it is written.
"""

from pydantic import BaseModel, ConfigDict, Field
from typing import Annotated, Optional, List, Dict, Union, Any
from datetime import datetime
from enum import Enum


# ============================================================
# ENUMS
# ============================================================

class CompanyStatus(str, Enum):
    pending = "pending"
    approved = "approved"
    rejected = "rejected"


class SubmissionType(str, Enum):
    online_questions = "onlineQuestions"
    interview_questions = "interviewQuestions"
    interview_process = "interviewProcess"
    must_do_topics = "mustDoTopics"


class SubmissionStatus(str, Enum):
    pending = "pending"
    approved = "approved"


class NotificationType(str, Enum):
    new_company = "new_company"


class FileType(str, Enum):
    pdf = "pdf"
    doc = "doc"
    docx = "docx"


# ============================================================
# COMPANY DOCUMENT (validated on every save)
# ============================================================

Text500 = Annotated[str, Field(max_length=500)]
Text200 = Annotated[str, Field(max_length=200)]

EMAIL_PATTERN = r".+@.+\..+"


class SelectedCandidate(BaseModel):
    name: str = Field(..., min_length=2, max_length=50)
    emailId: str = Field(..., pattern=EMAIL_PATTERN)


class Role(BaseModel):
    model_config = ConfigDict(extra="allow")

    roleName: str = Field(..., min_length=2, max_length=50)
    # save() normalizes the map before this model sees it
    ctc: Dict[str, Any] = {}
    internshipStipend: Optional[float] = Field(None, ge=0)
    finalPayFirstYear: Optional[str] = None
    finalPayAnnual: Optional[str] = None


class JobDescription(BaseModel):
    title: str = Field(..., min_length=1, max_length=100)
    fileUrl: str = Field(..., min_length=1)
    fileType: FileType


class McqQuestion(BaseModel):
    model_config = ConfigDict(extra="allow")

    question: Optional[str] = Field(None, max_length=300)
    optionA: Optional[str] = Field(None, max_length=100)
    optionB: Optional[str] = Field(None, max_length=100)
    optionC: Optional[str] = Field(None, max_length=100)
    optionD: Optional[str] = Field(None, max_length=100)
    answer: Optional[str] = Field(None, max_length=100)


class Submitter(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None


class CompanyDocument(BaseModel):
    """Shape constraints on a stored company. Unknown keys are allowed."""

    model_config = ConfigDict(extra="allow")

    name: str = Field(..., min_length=2, max_length=50)
    type: str = Field(..., min_length=1)
    business_model: Optional[str] = Field(None, max_length=100)
    eligibility: Optional[str] = Field(None, max_length=500)
    roles: List[Role] = []
    jobDescription: List[JobDescription] = []
    onlineQuestions: List[Text500] = []
    onlineQuestions_solution: List[Text500] = []
    mcqQuestions: List[McqQuestion] = []
    interviewQuestions: List[Text500] = []
    interviewQuestions_solution: List[Text500] = []
    interviewProcess: List[Text500] = []
    Must_Do_Topics: List[Text200] = []
    count: Optional[str] = None
    selectedCandidates: List[SelectedCandidate] = []
    date_of_visit: Optional[str] = None
    status: CompanyStatus = CompanyStatus.pending
    submittedBy: Optional[Submitter] = None
    videoKey: Optional[str] = None
    logo: Optional[str] = None
    helpfulCount: int = Field(0, ge=0)
    helpfulUsers: List[str] = []
    difficulty_ratings: List[Annotated[int, Field(ge=1, le=5)]] = []
    interview_difficulty_level: float = Field(0, ge=0, le=5)
    difficulty_rating_count: int = Field(0, ge=0)


# ============================================================
# COMPANY REQUESTS
# ============================================================

class RoleIn(BaseModel):
    roleName: str
    # Any shape; the normalizer zeroes what it cannot read
    ctc: Any = None
    internshipStipend: Optional[float] = None


class CompanyCreate(BaseModel):
    """Student-submitted company. Extra keys are kept on the document."""

    model_config = ConfigDict(extra="allow")

    name: str
    type: str
    business_model: Optional[str] = None
    eligibility: Optional[str] = None
    roles: List[RoleIn] = []
    count: Optional[Union[int, str]] = None
    date_of_visit: Optional[str] = None


class CompanyUpdate(BaseModel):
    """Admin edit: any subset of document fields."""

    model_config = ConfigDict(extra="allow")


class RatingRequest(BaseModel):
    rating: int = Field(..., ge=1, le=5)


# ============================================================
# SUBMISSION SCHEMAS
# ============================================================

class SubmissionCreate(BaseModel):
    # Plain strings: the service produces field-level errors for bad values
    companyId: str
    type: str
    content: str
    isAnonymous: bool = False


class SubmissionResponse(BaseModel):
    id: str = Field(..., alias="_id")
    companyId: str
    companyName: Optional[str] = None
    type: str
    content: str
    submittedBy: Submitter
    isAnonymous: bool = False
    status: SubmissionStatus
    submittedAt: datetime
    approvedAt: Optional[datetime] = None

    model_config = ConfigDict(populate_by_name=True)


# ============================================================
# NOTIFICATION SCHEMAS
# ============================================================

class NotificationResponse(BaseModel):
    id: str = Field(..., alias="_id")
    userId: str
    type: NotificationType
    title: str
    message: str
    companyId: Optional[str] = None
    isSeen: bool = False
    createdAt: datetime

    model_config = ConfigDict(populate_by_name=True)


class UnreadCountResponse(BaseModel):
    count: int


# ============================================================
# COMMENT SCHEMAS
# ============================================================

class CommentCreate(BaseModel):
    comment: Optional[str] = None


class CommentResponse(BaseModel):
    id: str = Field(..., alias="_id")
    companyId: str
    userId: str
    username: str
    comment: str
    createdAt: datetime
    updatedAt: Optional[datetime] = None

    model_config = ConfigDict(populate_by_name=True)


# ============================================================
# ADMIN SCHEMAS
# ============================================================

class AdminStatsResponse(BaseModel):
    totalUsers: int
    totalSubmissions: int
    totalCompanies: int
    pendingCompanies: int


# ============================================================
# GENERIC SCHEMAS
# ============================================================

class MessageResponse(BaseModel):
    message: str
    success: bool = True


class CompanyMessageResponse(MessageResponse):
    company: Dict[str, Any]


class ErrorResponse(BaseModel):
    error: str
    details: Optional[Dict[str, str]] = None
