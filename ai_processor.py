import os
import logging
import openai
from langchain_community.document_loaders import Docx2txtLoader, PyMuPDFLoader
from langchain_core.messages import AIMessage, HumanMessage, SystemMessage
from langchain_core.prompts import PromptTemplate
from langchain_openai import ChatOpenAI

# Import configuration
from config import (
    OPENAI_API_KEY, ANALYSIS_MODEL, CHAT_MODEL,
    ANALYSIS_TEMPERATURE, CHAT_TEMPERATURE,
    MAX_OUTPUT_TOKENS, CHAT_MAX_TOKENS, REQUEST_TIMEOUT,
    STRICT_VALIDATION, LOG_LEVEL
)
from constants import (
    ANALYSIS_PROMPT_TEMPLATE, CHAT_SYSTEM_PROMPT, CHAT_CONTEXT_SYSTEM_PROMPT,
    CHAT_FALLBACK_MESSAGE, RESPONSE_PREVIEW_LENGTH
)
from exceptions import (
    ConfigurationError, ExtractionError, ParseError, ValidationError,
    ModelResponseError, EmptyResponseError, ProviderAuthError, ProviderRateLimitError, ProviderTimeoutError
)
from utils import (
    extract_json_object, parse_json_response, validate_analysis, validate_analysis_strict,
    create_fallback_response, create_success_response
)

# Setup logging
logging.basicConfig(level=getattr(logging, LOG_LEVEL.upper(), logging.INFO))
logger = logging.getLogger(__name__)

# --- INITIALIZATION ---

analysis_prompt = PromptTemplate(
    template=ANALYSIS_PROMPT_TEMPLATE,
    input_variables=["contract_text"],
)

# Clients are created on first use so a missing key surfaces per request
llm_clients = {}


def get_llm(model, temperature, max_tokens):
    """Return a cached ChatOpenAI client for the given generation settings."""
    if not OPENAI_API_KEY:
        raise ConfigurationError("OPENAI_API_KEY is not set")

    key = (model, temperature, max_tokens)
    if key not in llm_clients:
        llm_clients[key] = ChatOpenAI(
            openai_api_key=OPENAI_API_KEY,
            model=model,
            temperature=temperature,
            max_tokens=max_tokens,
            timeout=REQUEST_TIMEOUT,
            max_retries=0,
        )
    return llm_clients[key]


def get_analysis_llm():
    return get_llm(ANALYSIS_MODEL, ANALYSIS_TEMPERATURE, MAX_OUTPUT_TOKENS)


def get_chat_llm():
    return get_llm(CHAT_MODEL, CHAT_TEMPERATURE, CHAT_MAX_TOKENS)


# --- HELPER FUNCTIONS FOR ANALYSIS ---

def build_analysis_prompt(contract_text):
    """Embed the contract text in the fixed analysis instructions."""
    return analysis_prompt.format(contract_text=contract_text)


def classify_provider_error(error):
    """
    Map an exception raised by the model client onto the error taxonomy.

    Credential, rate-limit and timeout failures become provider errors that
    the HTTP layer reports directly; anything else is a ModelResponseError.
    """
    if isinstance(error, openai.AuthenticationError):
        return ProviderAuthError(str(error))
    if isinstance(error, openai.RateLimitError):
        return ProviderRateLimitError(str(error))
    if isinstance(error, openai.APITimeoutError):
        return ProviderTimeoutError(str(error))

    message = str(error).lower()
    if "api key" in message:
        return ProviderAuthError(str(error))
    if "rate limit" in message:
        return ProviderRateLimitError(str(error))
    if "timeout" in message or "timed out" in message:
        return ProviderTimeoutError(str(error))
    return ModelResponseError(f"Model call failed: {error}")


def response_text(response):
    """Return the text block of a chat model response, or None."""
    content = getattr(response, "content", None)
    if isinstance(content, str):
        return content if content.strip() else None
    if isinstance(content, list) and content:
        block = content[0]
        if isinstance(block, str):
            return block if block.strip() else None
        if isinstance(block, dict) and block.get("type") == "text" and block.get("text"):
            return block["text"]
    return None


def invoke_model(prompt, llm=None):
    """Send one prompt to the model and return its text output."""
    llm = llm or get_analysis_llm()
    try:
        response = llm.invoke(prompt)
    except Exception as e:
        raise classify_provider_error(e) from e

    text = response_text(response)
    if text is None:
        logger.error(f"Invalid model response structure: {repr(response)[:RESPONSE_PREVIEW_LENGTH]}")
        raise EmptyResponseError("Invalid response structure from model")
    return text


def parse_analysis_response(ai_response):
    """Extract, decode and validate an analysis from raw model text."""
    candidate = extract_json_object(ai_response)
    analysis = parse_json_response(candidate)
    if STRICT_VALIDATION:
        validate_analysis_strict(analysis)
    else:
        validate_analysis(analysis)
    return analysis


# --- MAIN PUBLIC FUNCTIONS ---

def analyze_contract(contract_text, contract_id=None):
    """
    Run the full analysis pipeline for one contract.

    Returns the success envelope for a validated analysis or the fallback
    envelope when the model output cannot be used. Configuration and
    provider errors are raised for the caller to map onto HTTP statuses.
    """
    logger.info(f"Starting AI contract analysis for contract: {contract_id}")
    logger.info(f"Contract text length: {len(contract_text)} characters")

    prompt = build_analysis_prompt(contract_text)

    try:
        ai_response = invoke_model(prompt)
    except ModelResponseError as e:
        logger.error(f"Contract analysis error: {str(e)}")
        return create_fallback_response()

    logger.info("Model response received")
    logger.info(f"AI response length: {len(ai_response)} characters")

    try:
        analysis = parse_analysis_response(ai_response)
    except ExtractionError as e:
        logger.error(f"Failed to extract analysis JSON: {str(e)}")
        logger.info(f"Raw AI response preview: {ai_response[:RESPONSE_PREVIEW_LENGTH]}...")
        return create_fallback_response()
    except ParseError as e:
        logger.error(f"Failed to parse AI response: {str(e)}")
        return create_fallback_response()
    except ValidationError as e:
        logger.error(f"Analysis validation failed: {str(e)}")
        return create_fallback_response()

    logger.info("Analysis validation passed")
    return create_success_response(analysis, contract_id)


def chat_about_contract(messages, contract_text=None):
    """Answer a conversation about a contract, using it as system context when given."""
    if contract_text:
        system_prompt = CHAT_CONTEXT_SYSTEM_PROMPT.format(contract_text=contract_text)
    else:
        system_prompt = CHAT_SYSTEM_PROMPT

    chat_messages = [SystemMessage(content=system_prompt)]
    for message in messages:
        role = message.get("role")
        content = message.get("content")
        if not isinstance(content, str):
            raise ValueError("Each message needs string 'content'")
        if role == "user":
            chat_messages.append(HumanMessage(content=content))
        elif role == "assistant":
            chat_messages.append(AIMessage(content=content))
        else:
            raise ValueError(f"Unsupported message role: {role}")

    logger.info(f"Processing chat with {len(messages)} message(s)")
    try:
        return invoke_model(chat_messages, llm=get_chat_llm())
    except EmptyResponseError:
        return CHAT_FALLBACK_MESSAGE


# Loader per supported upload extension
DOCUMENT_LOADERS = {
    ".pdf": PyMuPDFLoader,
    ".docx": Docx2txtLoader,
}


def extract_document_text(filepath):
    """Load a PDF or DOCX file and return its text, one page or document per paragraph."""
    extension = os.path.splitext(filepath)[1].lower()
    loader_class = DOCUMENT_LOADERS.get(extension)
    if loader_class is None:
        raise ValueError(f"Unsupported file type: {extension or filepath}")

    logger.info(f"Extracting text from: {filepath}")
    loader = loader_class(filepath)
    documents = loader.load()
    text = "\n\n".join(doc.page_content.strip() for doc in documents if doc.page_content.strip())
    logger.info(f"Extracted {len(text)} characters from {len(documents)} page(s)")
    return text
