"""
Profile verification for athletes, coaches and sponsors.

An Aadhaar number is checked locally (12 digits with a Verhoeff check digit),
uploaded certificates are stored on the media host and given a best-effort
authenticity assessment by the model. Only the last four digits of the
Aadhaar number are persisted.
"""
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile
from stdnum.in_ import aadhaar

from ai_client import get_ai, parse_model_json
from config import get_settings
from database import ROLE_COLLECTIONS, VERIFICATION, get_db, get_document, set_document, update_document
from errors import NotFoundError, ParseError, ValidationError
from media import get_media, read_upload
from schemas import Certificate, IdVerification, Verification, utcnow_iso
from security import get_current_user

logger = logging.getLogger(__name__)

router = APIRouter()

MAX_CERTIFICATES = 5

CERTIFICATE_PROMPT = """I need to verify if this appears to be a legitimate {kind}.

Certificate name: {name}
File type: {content_type}
URL: {url}

Please analyze the following:
1. Does this appear to be a genuine {kind} based on available data?
2. Are there any obvious signs of forgery or inconsistency?
3. Provide a confidence score (0-100) on its authenticity.
4. Summarize your findings in one sentence.

Format your response as a JSON object with keys: isLegitimate (boolean), confidenceScore (number), reasoning (string), summary (string)."""

CERTIFICATE_KINDS = {
    "Athlete": "athletic certificate or sports-related credential",
    "Coach": "coaching certificate",
}


def validate_aadhaar(number: Optional[str]) -> str:
    if not number or not aadhaar.is_valid(number):
        raise ValidationError("Valid 12-digit Aadhar number is required")
    return aadhaar.compact(number)


def mask_aadhaar(number: str) -> str:
    return f"XXXX-XXXX-{number[-4:]}"


def assess_certificate(ai, kind: str, name: str, content_type: str, url: str) -> dict:
    reply = ai.generate(CERTIFICATE_PROMPT.format(kind=kind, name=name, content_type=content_type, url=url))
    try:
        return parse_model_json(reply)
    except ParseError:
        logger.warning("Unparseable certificate assessment for %s", name)
        return {
            "isLegitimate": None,
            "confidenceScore": 0,
            "reasoning": "Failed to parse AI response",
            "summary": reply[:100] + "...",
        }


class ProfileVerifier:
    def __init__(self, db, ai, media, max_bytes: int):
        self.db = db
        self.ai = ai
        self.media = media
        self.max_bytes = max_bytes

    def verify(self, user_id: str, role: str, aadhar_number: Optional[str], files: List[UploadFile], **extras) -> dict:
        collection = ROLE_COLLECTIONS[role]
        if get_document(self.db, collection, user_id) is None:
            raise NotFoundError(f"{role} not found")
        number = validate_aadhaar(aadhar_number)
        if len(files) > MAX_CERTIFICATES:
            raise ValidationError(f"At most {MAX_CERTIFICATES} certificates can be uploaded")

        contents = [read_upload(f, self.max_bytes) for f in files]
        certificates, assessments = [], []
        for upload, content in zip(files, contents):
            resource_type = "image" if upload.content_type.startswith("image") else "raw"
            result = self.media.upload(content, "certificates", resource_type=resource_type)
            certificate = Certificate(
                name=upload.filename or "certificate",
                url=result["secure_url"],
                publicId=result.get("public_id"),
                format=result.get("format") or upload.content_type.split("/")[1],
            )
            certificates.append(certificate)
            assessments.append({
                "certificate": certificate.name,
                "aiVerification": assess_certificate(
                    self.ai, CERTIFICATE_KINDS[role], certificate.name, upload.content_type, certificate.url
                ),
            })

        record = Verification(
            userId=user_id,
            role=role,
            idVerification=IdVerification(
                aadharNumber=mask_aadhaar(number),
                certificates=certificates,
                certificatesVerification=assessments,
                **extras,
            ),
        )
        set_document(self.db, VERIFICATION, user_id, record)
        update_document(self.db, collection, user_id, lambda doc: {"isVerified": True, "verifiedAt": utcnow_iso()})
        logger.info("%s %s verified", role, user_id)

        summary = {
            "status": "verified",
            "idType": "aadhar",
            "aadharLastFour": number[-4:],
            **{k: v for k, v in extras.items() if v is not None},
        }
        if role in CERTIFICATE_KINDS:
            summary["certificatesCount"] = len(certificates)
            summary["certificatesVerified"] = len(assessments)
        return summary


def get_verifier(db=Depends(get_db), ai=Depends(get_ai), media=Depends(get_media), settings=Depends(get_settings)):
    return ProfileVerifier(db, ai, media, settings.UPLOAD_MAX_BYTES)


@router.post("/athlete/{id}")
def verify_athlete(
    id: str,
    aadharNumber: Optional[str] = Form(None),
    certificates: List[UploadFile] = File(default=[]),
    verifier: ProfileVerifier = Depends(get_verifier),
    current=Depends(get_current_user),
):
    verification = verifier.verify(id, "Athlete", aadharNumber, certificates)
    return {"success": True, "message": "Athlete verification completed successfully", "verification": verification}


@router.post("/coach/{id}")
def verify_coach(
    id: str,
    aadharNumber: Optional[str] = Form(None),
    experienceYears: Optional[int] = Form(None),
    teamAffiliation: Optional[str] = Form(None),
    licenseNumber: Optional[str] = Form(None),
    certificates: List[UploadFile] = File(default=[]),
    verifier: ProfileVerifier = Depends(get_verifier),
    current=Depends(get_current_user),
):
    verification = verifier.verify(
        id, "Coach", aadharNumber, certificates,
        experienceYears=experienceYears,
        teamAffiliation=teamAffiliation,
        licenseNumber=licenseNumber,
    )
    return {"success": True, "message": "Coach verification completed successfully", "verification": verification}


@router.post("/sponsor/{id}")
def verify_sponsor(
    id: str,
    aadharNumber: Optional[str] = Form(None),
    companyRegistrationNumber: Optional[str] = Form(None),
    verifier: ProfileVerifier = Depends(get_verifier),
    current=Depends(get_current_user),
):
    verification = verifier.verify(
        id, "Sponsor", aadharNumber, [], companyRegistrationNumber=companyRegistrationNumber
    )
    return {"success": True, "message": "Sponsor verification completed successfully", "verification": verification}
