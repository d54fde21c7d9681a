"""Pydantic models for data validation and structure."""

from pydantic import BaseModel, Field
from typing import List, Literal

RiskCategory = Literal["legal", "financial", "operational", "regulatory"]
RiskRating = Literal["high", "medium", "low"]


class KeyFinding(BaseModel):
    """A single headline risk identified in the contract."""
    title: str
    description: str = Field(description="Two to three sentences on the risk and its implications.")
    severity: RiskRating
    category: RiskCategory


class Recommendation(BaseModel):
    """An actionable recommendation for the reader of the contract."""
    title: str
    description: str
    priority: RiskRating
    category: RiskCategory


class MissingClause(BaseModel):
    clause: str
    importance: Literal["critical", "important", "recommended"]
    description: str
    potentialRisk: str


class SectionFinding(BaseModel):
    finding: str
    riskLevel: RiskRating
    recommendation: str


class SectionAnalysis(BaseModel):
    """Analysis of one fixed contract section."""
    title: str
    content: str
    keyFindings: List[SectionFinding]


class Sections(BaseModel):
    parties: SectionAnalysis
    paymentTerms: SectionAnalysis
    termination: SectionAnalysis
    liability: SectionAnalysis
    intellectualProperty: SectionAnalysis
    confidentiality: SectionAnalysis
    disputeResolution: SectionAnalysis
    governingLaw: SectionAnalysis


class CategoryRisk(BaseModel):
    level: RiskRating
    description: str
    keyConcerns: List[str]
    recommendations: List[str]


class RiskSummary(BaseModel):
    legal: CategoryRisk
    financial: CategoryRisk
    operational: CategoryRisk
    regulatory: CategoryRisk


class ContractMetadata(BaseModel):
    estimatedValue: str
    contractDuration: str
    partiesInvolved: List[str]
    industry: str
    contractType: str


class AnalysisResult(BaseModel):
    """Structured contract risk report returned by the analysis endpoint."""
    overallRiskLevel: Literal["Low Risk", "Medium Risk", "High Risk"]
    keyFindings: List[KeyFinding] = Field(min_length=1)
    recommendations: List[Recommendation]
    missingClauses: List[MissingClause]
    sections: Sections
    riskSummary: RiskSummary
    contractMetadata: ContractMetadata
