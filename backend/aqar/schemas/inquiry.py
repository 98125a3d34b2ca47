from dataclasses import dataclass


@dataclass(frozen=True)
class InquiryCreate:
    property_id: str
    message: str


@dataclass(frozen=True)
class InquiryReply:
    response: str
