"""
Utility functions for the contract analysis API.
"""
import os
import re
import json
import logging
from datetime import datetime, timezone
from typing import Dict, Any

from pydantic import ValidationError as SchemaValidationError
from werkzeug.utils import secure_filename

from constants import (
    REQUIRED_FIELDS, RISK_LEVELS, CONTRACT_SECTIONS, RISK_CATEGORIES,
    RESPONSE_PREVIEW_LENGTH, SUPPORTED_UPLOAD_EXTENSIONS
)
from exceptions import ExtractionError, ParseError, ValidationError
from schemas import AnalysisResult

logger = logging.getLogger(__name__)

CODE_FENCE_PATTERN = re.compile(r"```(?:json)?\s*")


def validate_upload_file(file):
    """
    Validate an uploaded PDF or DOCX file.

    Args:
        file: Uploaded file object

    Returns:
        tuple: (is_valid, error_message)
    """
    if not file:
        return False, "No file provided"

    if file.filename == '':
        return False, "No file selected"

    if not file.filename.lower().endswith(SUPPORTED_UPLOAD_EXTENSIONS):
        return False, "Unsupported file type. Please upload a PDF or DOCX file."

    return True, ""


def safe_file_cleanup(filepath):
    """
    Safely remove a file with error handling.

    Args:
        filepath: Path to file to remove

    Returns:
        bool: True if successfully removed or file doesn't exist
    """
    try:
        if os.path.exists(filepath):
            os.remove(filepath)
            logger.info(f"Cleaned up file: {filepath}")
        return True
    except OSError as e:
        logger.warning(f"Failed to cleanup file {filepath}: {str(e)}")
        return False


def get_secure_filename(original_filename):
    """
    Get a secure filename for upload.

    Args:
        original_filename: Original filename from upload

    Returns:
        str: Secure filename, or an empty string if nothing safe remains
    """
    return secure_filename(original_filename)


def log_error_and_return(error_msg, status_code=500, detail=None):
    """
    Log an error and return a formatted error response.

    Args:
        error_msg: Error message returned to the caller
        status_code: HTTP status code
        detail: Optional diagnostic text that is logged but not returned

    Returns:
        tuple: (error_dict, status_code)
    """
    if detail:
        logger.error(f"{error_msg}: {detail}")
    else:
        logger.error(error_msg)
    return {"error": error_msg}, status_code


def utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


# --- MODEL OUTPUT HANDLING ---

def extract_json_object(response_content: str) -> str:
    """
    Pull the JSON object out of raw model output.

    Code fences are removed and everything between the first '{' and the
    last '}' is returned. Braces are not balanced, so output holding several
    objects yields a single slice spanning all of them.
    """
    cleaned = CODE_FENCE_PATTERN.sub("", response_content.strip())

    first_brace = cleaned.find("{")
    last_brace = cleaned.rfind("}")
    if first_brace == -1 or last_brace == -1 or last_brace < first_brace:
        raise ExtractionError("No JSON object found in response")

    return cleaned[first_brace:last_brace + 1]


def parse_json_response(candidate: str) -> Any:
    """Strictly decode a JSON candidate. No repair is attempted."""
    try:
        return json.loads(candidate)
    except (ValueError, RecursionError) as e:
        # JSONDecodeError is a ValueError; oversized integers and deep nesting raise the others
        logger.error(f"Failed to parse JSON: {str(e)}")
        logger.error(f"Unparseable candidate preview: {candidate[:RESPONSE_PREVIEW_LENGTH]}")
        raise ParseError(f"Failed to parse AI response as JSON: {e}", candidate=candidate, cause=e) from e


def validate_analysis(analysis: Any) -> None:
    """
    Shallow structural check of a parsed analysis.

    Raises ValidationError on the first failing check. Nested entries
    (finding severities, section findings, ...) are not inspected.
    """
    if not isinstance(analysis, dict):
        raise ValidationError("Analysis must be a JSON object")

    for field in REQUIRED_FIELDS:
        if field not in analysis:
            raise ValidationError(f"Missing required field: {field}")

    if analysis["overallRiskLevel"] not in RISK_LEVELS:
        raise ValidationError("Invalid overallRiskLevel value")

    key_findings = analysis["keyFindings"]
    if not isinstance(key_findings, list) or len(key_findings) == 0:
        raise ValidationError("keyFindings must be a non-empty array")

    sections = analysis["sections"]
    if not isinstance(sections, dict):
        raise ValidationError("sections must be an object")
    for section in CONTRACT_SECTIONS:
        if section not in sections:
            raise ValidationError(f"Missing required section: {section}")

    risk_summary = analysis["riskSummary"]
    if risk_summary is None or not isinstance(risk_summary, dict):
        raise ValidationError("riskSummary must be an object")
    for category in RISK_CATEGORIES:
        if category not in risk_summary:
            raise ValidationError(f"Missing required riskSummary field: {category}")


def validate_analysis_strict(analysis: Any) -> None:
    """Run the shallow checks, then validate every leaf against AnalysisResult."""
    validate_analysis(analysis)
    try:
        AnalysisResult.model_validate(analysis)
    except SchemaValidationError as e:
        raise ValidationError(f"Analysis does not match schema: {e.error_count()} error(s)") from e


def create_fallback_analysis() -> Dict[str, Any]:
    """Build the static analysis returned when the model output is unusable."""
    unavailable = "Automated analysis of this section is temporarily unavailable."
    return {
        "overallRiskLevel": "Medium Risk",
        "keyFindings": [
            {
                "title": "Analysis System Temporarily Unavailable",
                "description": "The automated contract analysis system encountered an issue while processing your document. This may be due to temporary service disruption, document formatting issues, or system maintenance. Please try uploading your contract again in a few minutes.",
                "severity": "medium",
                "category": "operational",
            },
            {
                "title": "Manual Review Recommended",
                "description": "While the automated system is unavailable, we recommend having your contract reviewed by a qualified legal professional, especially if this is a time-sensitive agreement. Manual review can provide comprehensive analysis that automated systems may miss.",
                "severity": "medium",
                "category": "legal",
            },
            {
                "title": "Document Processing Issue",
                "description": "The system was unable to complete the standard risk assessment process for your contract. This could indicate complex document structure, unusual formatting, or temporary technical difficulties. Consider reformatting the document or trying again later.",
                "severity": "low",
                "category": "operational",
            },
        ],
        "recommendations": [
            {
                "title": "Retry the analysis",
                "description": "Try re-uploading your contract in a few minutes.",
                "priority": "high",
                "category": "operational",
            },
            {
                "title": "Check the document format",
                "description": "Ensure your document is in a supported format (PDF, DOCX).",
                "priority": "medium",
                "category": "operational",
            },
            {
                "title": "Contact support",
                "description": "Contact support if the issue persists.",
                "priority": "medium",
                "category": "operational",
            },
            {
                "title": "Seek legal review",
                "description": "Consider manual legal review for urgent contracts.",
                "priority": "low",
                "category": "legal",
            },
        ],
        "missingClauses": [
            {
                "clause": "Automated clause detection",
                "importance": "recommended",
                "description": "Automated clause detection is temporarily unavailable.",
                "potentialRisk": "Missing clauses could not be identified for this document.",
            }
        ],
        "sections": {
            key: {
                "title": title,
                "content": unavailable,
                "keyFindings": [
                    {
                        "finding": f"{title} could not be analyzed automatically.",
                        "riskLevel": "medium",
                        "recommendation": "Review this section manually or try the analysis again later.",
                    }
                ],
            }
            for key, title in CONTRACT_SECTIONS.items()
        },
        "riskSummary": {
            "legal": {
                "level": "medium",
                "description": "The automated contract analysis system is temporarily unavailable. This is a technical issue with our analysis service, not a problem with your contract.",
                "keyConcerns": ["Legal risk assessment unavailable"],
                "recommendations": ["Consider manual legal review for urgent contracts"],
            },
            "financial": {
                "level": "medium",
                "description": "Unable to assess financial risks due to system unavailability. Manual review recommended for financial terms.",
                "keyConcerns": ["Financial terms not assessed"],
                "recommendations": ["Review payment and liability terms manually"],
            },
            "operational": {
                "level": "medium",
                "description": "Operational risk assessment unavailable. Please try again or contact support for manual analysis options.",
                "keyConcerns": ["Operational obligations not assessed"],
                "recommendations": ["Try re-uploading your contract in a few minutes"],
            },
            "regulatory": {
                "level": "medium",
                "description": "Regulatory compliance could not be assessed while the analysis service is unavailable.",
                "keyConcerns": ["Regulatory obligations not assessed"],
                "recommendations": ["Contact support if the issue persists"],
            },
        },
        "contractMetadata": {
            "estimatedValue": "Not available",
            "contractDuration": "Not available",
            "partiesInvolved": [],
            "industry": "Not available",
            "contractType": "Not available",
        },
    }


def create_fallback_response() -> Dict[str, Any]:
    """Wrap the fallback analysis in the degraded response envelope."""
    return {
        "success": True,
        "analysis": create_fallback_analysis(),
        "timestamp": utc_timestamp(),
        "fallback": True,
    }


def create_success_response(analysis: Dict[str, Any], contract_id=None) -> Dict[str, Any]:
    response = {"success": True, "analysis": analysis}
    if contract_id is not None:
        response["contractId"] = contract_id
    response["timestamp"] = utc_timestamp()
    return response
