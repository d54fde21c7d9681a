"""Constants and configuration values."""

# Top-level fields every analysis must carry
REQUIRED_FIELDS = (
    "overallRiskLevel",
    "keyFindings",
    "recommendations",
    "missingClauses",
    "sections",
    "riskSummary",
    "contractMetadata",
)

RISK_LEVELS = ("Low Risk", "Medium Risk", "High Risk")

# Section keys and their display titles
CONTRACT_SECTIONS = {
    "parties": "Parties",
    "paymentTerms": "Payment Terms",
    "termination": "Termination",
    "liability": "Liability",
    "intellectualProperty": "Intellectual Property",
    "confidentiality": "Confidentiality",
    "disputeResolution": "Dispute Resolution",
    "governingLaw": "Governing Law",
}

RISK_CATEGORIES = ("legal", "financial", "operational", "regulatory")

# Uploads the text extractor can read
SUPPORTED_UPLOAD_EXTENSIONS = (".pdf", ".docx")

# Logged prefix length for unparseable model output
RESPONSE_PREVIEW_LENGTH = 500

CHAT_FALLBACK_MESSAGE = "I apologize, but I was unable to generate a response."

CHAT_SYSTEM_PROMPT = (
    "You are an AI assistant specialized in contract analysis. "
    "Please provide helpful responses about contract-related questions."
)

CHAT_CONTEXT_SYSTEM_PROMPT = (
    "You are an AI assistant specialized in contract analysis. "
    "You have access to the following contract content: {contract_text}. "
    "Please provide helpful, accurate responses about the contract terms, obligations, "
    "and any questions the user might have."
)

# Prompt templates
ANALYSIS_PROMPT_TEMPLATE = """SYSTEM: You are a legal analysis engine that reads uploaded contracts and outputs structured risk assessments in strict JSON format. You are a contract analysis expert. Always return valid JSON only, never use markdown code blocks or additional formatting.

CRITICAL: Return ONLY valid JSON. Do NOT wrap your response in markdown code blocks or add any text before or after the JSON object. Your response must start with {{ and end with }} with no additional text, markdown formatting, or code blocks.

USER: Analyze the uploaded contract and respond ONLY with valid JSON that matches this schema:

{{
  "overallRiskLevel": string, // one of 'Low Risk', 'Medium Risk', 'High Risk'
  "keyFindings": [
    {{
      "title": string,
      "description": string,
      "severity": string, // one of 'high', 'medium', 'low'
      "category": string // one of 'legal', 'financial', 'operational', 'regulatory'
    }}
  ],
  "recommendations": [
    {{
      "title": string,
      "description": string,
      "priority": string, // one of 'high', 'medium', 'low'
      "category": string // one of 'legal', 'financial', 'operational', 'regulatory'
    }}
  ],
  "missingClauses": [
    {{
      "clause": string,
      "importance": string, // one of 'critical', 'important', 'recommended'
      "description": string,
      "potentialRisk": string
    }}
  ],
  "sections": {{
    // every key below is required: parties, paymentTerms, termination, liability,
    // intellectualProperty, confidentiality, disputeResolution, governingLaw
    "parties": {{
      "title": string,
      "content": string,
      "keyFindings": [
        {{
          "finding": string,
          "riskLevel": string, // one of 'high', 'medium', 'low'
          "recommendation": string
        }}
      ]
    }}
  }},
  "riskSummary": {{
    // every key below is required: legal, financial, operational, regulatory
    "legal": {{
      "level": string, // one of 'high', 'medium', 'low'
      "description": string,
      "keyConcerns": [string],
      "recommendations": [string]
    }}
  }},
  "contractMetadata": {{
    "estimatedValue": string,
    "contractDuration": string,
    "partiesInvolved": [string],
    "industry": string,
    "contractType": string
  }}
}}

ANALYSIS REQUIREMENTS:
1. Provide 5-10 key findings with specific titles and detailed descriptions
2. Fill in all eight sections with the relevant contract text and findings for each
3. Identify 2-5 missing clauses that should be present
4. Provide 3-7 actionable recommendations
5. Give comprehensive risk summaries for legal, financial, operational and regulatory aspects

Important rules:
1. Output ONLY valid JSON (no extra text, no code fences, no explanations).
2. Do NOT include trailing commas.
3. Do NOT include null values — use empty arrays [] or empty strings "" instead.
4. All text values must be in double quotes.
5. Ensure the JSON parses correctly with a strict JSON parser.
6. STRICT NO-EMOJI POLICY: You must NEVER use emojis, emoticons, or any informal symbols in your responses. Maintain a completely professional and formal tone throughout all analysis content.
7. Do NOT wrap your response in markdown code blocks.
8. Your response must start with {{ and end with }} with no additional text.
9. NEVER return placeholder content like "Analysis incomplete" or "Manual review recommended" - always provide actual analysis
10. Each key finding description should be at least 2-3 sentences explaining the specific risk and its implications
11. If a section is not covered by the contract, say so in its content and list the resulting risk as a finding

CONTRACT TEXT TO ANALYZE:
{contract_text}

Remember: Return ONLY the JSON object, no markdown formatting, no code blocks, no explanatory text. Provide substantial, meaningful analysis - not placeholder content."""
