import os
import logging
import zipfile
from datetime import datetime
from flask import Flask, request, jsonify
from flask_cors import CORS
from werkzeug.exceptions import HTTPException

# Import configuration and processing functions
from config import (
    UPLOAD_FOLDER, API_HOST, API_PORT, API_DEBUG, API_VERSION,
    MAX_FILE_SIZE, MAX_CONTRACT_LENGTH, LOG_LEVEL
)
from ai_processor import analyze_contract, chat_about_contract, extract_document_text
from exceptions import ConfigurationError, ProviderError
from utils import (
    validate_upload_file, get_secure_filename, safe_file_cleanup,
    log_error_and_return, create_fallback_response
)

# Setup logging
logging.basicConfig(level=getattr(logging, LOG_LEVEL.upper(), logging.INFO))
logger = logging.getLogger(__name__)

# --- FLASK APP SETUP ---
app = Flask(__name__)
CORS(app)  # Cross-Origin Resource Sharing configuration for frontend compatibility

# File upload directory configuration
if not os.path.exists(UPLOAD_FOLDER):
    os.makedirs(UPLOAD_FOLDER)
app.config['UPLOAD_FOLDER'] = UPLOAD_FOLDER
app.config['MAX_CONTENT_LENGTH'] = MAX_FILE_SIZE

logger.info("Flask application initialized")

# --- API ENDPOINTS ---

@app.route('/ping', methods=['GET'])
def ping():
    """
    Health check endpoint to verify the server is running.
    Returns server status and timestamp.
    """
    return jsonify({
        "status": "ok",
        "message": "HelloACA Contract Analysis API is running",
        "timestamp": datetime.now().isoformat(),
        "version": API_VERSION
    }), 200


@app.route('/analyze-contract', methods=['POST', 'OPTIONS'])
def analyze_contract_endpoint():
    """
    Runs the AI risk analysis for a contract's text.

    Output-quality problems come back as a 200 fallback analysis; credential,
    rate-limit and timeout failures of the model call return 401/429/408.
    """
    if request.method == 'OPTIONS':
        return '', 200

    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        data = {}
    contract_text = data.get('contractText')
    contract_id = data.get('contractId')

    # Validate request body
    if not contract_text or not isinstance(contract_text, str):
        return jsonify({"error": "Contract text is required"}), 400

    if len(contract_text) > MAX_CONTRACT_LENGTH:
        return jsonify({"error": f"Contract text too long (max {MAX_CONTRACT_LENGTH:,} characters)"}), 400

    try:
        result = analyze_contract(contract_text, contract_id)
        return jsonify(result), 200

    except ConfigurationError as e:
        body, status = log_error_and_return("Server configuration error", 500, detail=str(e))
        return jsonify(body), status

    except ProviderError as e:
        body, status = log_error_and_return(e.public_message, e.status_code, detail=str(e))
        return jsonify(body), status

    except Exception as e:
        # Unexpected failures still give the dashboard a usable result
        logger.exception(f"Contract analysis error: {str(e)}")
        return jsonify(create_fallback_response()), 200


@app.route('/extract-text', methods=['POST'])
def extract_text():
    """
    Handles PDF or DOCX upload and returns the extracted contract text.
    """
    # Read before the try so an oversized upload surfaces as Flask's 413
    file = request.files.get('file')
    is_valid, error_message = validate_upload_file(file)
    if not is_valid:
        return jsonify({"error": error_message}), 400

    filepath = None

    try:
        # Save file securely
        filename = get_secure_filename(file.filename)
        if not filename:
            return jsonify({"error": "Invalid file name"}), 400
        filepath = os.path.join(app.config['UPLOAD_FOLDER'], filename)
        file.save(filepath)

        kind = "DOCX" if filename.lower().endswith(".docx") else "PDF"
        if os.path.getsize(filepath) == 0:
            return jsonify({"error": f"{kind} file appears to be empty"}), 400

        logger.info(f"Processing document: {filename}")
        text = extract_document_text(filepath)

        if not text.strip():
            if kind == "DOCX":
                message = "No text could be extracted from the DOCX document. The file may be corrupted or contain only images."
            else:
                message = "No text could be extracted from the PDF. This may be a scanned document or image-based PDF that requires OCR processing."
            return jsonify({"error": message}), 400

        return jsonify({
            "text": text,
            "fileName": filename,
            "wordCount": len(text.split()),
            "characterCount": len(text)
        }), 200

    except zipfile.BadZipFile as e:
        body, status = log_error_and_return(
            "The DOCX file appears to be corrupted or password protected. Please upload an unprotected version.",
            400, detail=str(e)
        )
        return jsonify(body), status

    except HTTPException:
        raise

    except Exception as e:
        body, status = log_error_and_return("Failed to process document", 500, detail=str(e))
        return jsonify(body), status

    finally:
        # Temporary file cleanup
        if filepath:
            safe_file_cleanup(filepath)


@app.route('/chat', methods=['POST'])
def chat():
    """
    Answers follow-up questions about a contract.
    """
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        data = {}
    messages = data.get('messages')
    contract_text = data.get('contractText')

    if not isinstance(messages, list) or not messages or not all(isinstance(m, dict) for m in messages):
        return jsonify({"error": "Missing 'messages' in request body"}), 400

    if contract_text is not None and not isinstance(contract_text, str):
        return jsonify({"error": "'contractText' must be a string"}), 400

    try:
        answer = chat_about_contract(messages, contract_text)
        return jsonify({"response": answer}), 200

    except ValueError as e:
        return jsonify({"error": str(e)}), 400

    except ConfigurationError as e:
        body, status = log_error_and_return("Server configuration error", 500, detail=str(e))
        return jsonify(body), status

    except ProviderError as e:
        body, status = log_error_and_return(e.public_message, e.status_code, detail=str(e))
        return jsonify(body), status

    except Exception as e:
        body, status = log_error_and_return("Failed to get response from the AI service", 500, detail=str(e))
        return jsonify(body), status


# --- RUN THE APP ---
if __name__ == '__main__':
    # Application server configuration
    logger.info(f"Starting HelloACA Contract Analysis API on {API_HOST}:{API_PORT}")
    app.run(host=API_HOST, port=API_PORT, debug=API_DEBUG)
