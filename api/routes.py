"""
API routes for the Business Card Extraction API.

Flask REST API endpoints for extracting contact records from card images.
"""

import logging
from typing import Optional

from flask import Blueprint, request, jsonify
from werkzeug.utils import secure_filename

from cardscan import CardExtractor, CardParser, RecognizerSession, EasyOCRRecognizer, score_draft
from cardscan.batch_processor import process_batch as run_batch
from cardscan.engine import default_passes
from cardscan.errors import PassFailure, RecognizerInitError
from cardscan.preprocessing import ImagePreprocessor
from config import Config

logger = logging.getLogger(__name__)

# Create Blueprint
api_bp = Blueprint("api", __name__, url_prefix="/api")

# Extractor instance (lazy initialization)
_extractor: Optional[CardExtractor] = None


def get_extractor() -> CardExtractor:
    """Get or create the shared extractor.

    The recognizer itself is created on the first extraction, not here.

    Returns:
        CardExtractor instance
    """
    global _extractor

    if _extractor is None:
        preprocessor = ImagePreprocessor(
            max_width=Config.ENHANCE_MAX_WIDTH,
            max_scale=Config.ENHANCE_MAX_SCALE,
            contrast=Config.ENHANCE_CONTRAST
        )
        session = RecognizerSession(
            lambda languages: EasyOCRRecognizer(
                languages,
                gpu=Config.OCR_GPU,
                model_dir=Config.OCR_MODEL_DIR
            )
        )
        _extractor = CardExtractor(
            session=session,
            passes=default_passes(
                preprocessor,
                enhanced=Config.ENHANCED_PASS,
                sparse=Config.SPARSE_PASS
            )
        )
        logger.info(f"Extractor initialized with passes: {[p.name for p in _extractor.passes]}")

    return _extractor


def allowed_file(filename: str) -> bool:
    """Check if file extension is allowed.

    Args:
        filename: Name of the file

    Returns:
        True if allowed, False otherwise
    """
    return Config.is_allowed_file(filename)


def get_languages() -> str:
    """Language selector from the form or query string, else the configured default."""
    return request.form.get("langs") or request.args.get("langs") or Config.OCR_LANGUAGES


@api_bp.route("/health", methods=["GET"])
def health_check():
    """Health check endpoint.

    Returns:
        JSON with health status
    """
    return jsonify({
        "success": True,
        "status": "healthy",
        "message": "Business Card Extraction API is running",
        "version": "1.0.0"
    }), 200


@api_bp.route("/status", methods=["GET"])
def get_status():
    """Get API and extractor status.

    Returns:
        JSON with status information
    """
    try:
        extractor = get_extractor()
        status = extractor.get_status()

        return jsonify({
            "success": True,
            "data": {
                "api_status": "running",
                "extractor_status": status,
                "passes_enabled": Config.get_pass_status(),
                "default_languages": Config.OCR_LANGUAGES
            }
        }), 200

    except Exception as e:
        logger.error(f"Error getting status: {str(e)}")
        return jsonify({
            "success": False,
            "error": str(e)
        }), 500


@api_bp.route("/extract", methods=["POST"])
def extract_card():
    """Extract a contact record from a single business card image.

    Expects:
        - multipart/form-data with 'file' field
        - Optional 'langs' field or query param, e.g. eng+rus

    Returns:
        JSON with the card, its score and every scored draft
    """
    if "file" not in request.files:
        return jsonify({
            "success": False,
            "error": "No file provided. Use 'file' field in form-data."
        }), 400

    file = request.files["file"]

    if file.filename == "":
        return jsonify({
            "success": False,
            "error": "No file selected"
        }), 400

    if not allowed_file(file.filename):
        return jsonify({
            "success": False,
            "error": f"File type not allowed. Allowed: {', '.join(sorted(Config.ALLOWED_EXTENSIONS))}"
        }), 400

    filename = secure_filename(file.filename)
    languages = get_languages()
    data = file.read()

    if not data:
        return jsonify({
            "success": False,
            "error": "Uploaded file is empty"
        }), 400

    logger.info(f"Processing uploaded file: {filename} (langs={languages})")

    try:
        result = get_extractor().extract(data, languages)

    except RecognizerInitError as e:
        logger.error(f"Recognizer unavailable: {str(e)}")
        return jsonify({
            "success": False,
            "error": str(e)
        }), 503

    except PassFailure as e:
        logger.error(f"All recognition passes failed for {filename}: {str(e)}")
        return jsonify({
            "success": False,
            "error": str(e),
            "failed_pass": e.pass_name
        }), 422

    except Exception as e:
        logger.error(f"Error processing file: {str(e)}")
        return jsonify({
            "success": False,
            "error": str(e)
        }), 500

    return jsonify({
        "success": True,
        "filename": filename,
        "needs_review": result.score < Config.REVIEW_SCORE_THRESHOLD,
        **result.to_dict()
    }), 200


@api_bp.route("/batch", methods=["POST"])
def process_batch():
    """Extract several cards concurrently.

    Expects:
        - multipart/form-data with 'files' field (multiple files)
        - Optional 'langs' field or query param

    Returns:
        JSON with one result per accepted file, in upload order
    """
    if "files" not in request.files:
        return jsonify({
            "success": False,
            "error": "No files provided"
        }), 400

    filenames = []
    images = []
    for file in request.files.getlist("files"):
        if file.filename and allowed_file(file.filename):
            filenames.append(secure_filename(file.filename))
            images.append(file.read())

    if not images:
        return jsonify({
            "success": False,
            "error": "No valid files to process"
        }), 400

    try:
        items = run_batch(
            get_extractor(),
            images,
            get_languages(),
            max_workers=Config.PARALLEL_WORKERS
        )

    except Exception as e:
        logger.exception("Unhandled error in /batch")
        return jsonify({
            "success": False,
            "error": str(e)
        }), 500

    results = []
    for filename, item in zip(filenames, items):
        entry = item.to_dict()
        entry["filename"] = filename
        entry["needs_review"] = item.success and item.score < Config.REVIEW_SCORE_THRESHOLD
        results.append(entry)

    successful = sum(1 for item in items if item.success)

    return jsonify({
        "success": True,
        "results": results,
        "total": len(results),
        "successful": successful,
        "failed": len(results) - successful
    }), 200


@api_bp.route("/parse-text", methods=["POST"])
def parse_text():
    """Parse raw recognized text (skip OCR).

    Expects:
        - JSON body with 'text' field

    Returns:
        JSON with the parsed draft and its score
    """
    data = request.get_json(silent=True)

    if not data or not isinstance(data.get("text"), str):
        return jsonify({
            "success": False,
            "error": "No text provided. Send JSON with 'text' field."
        }), 400

    try:
        draft = CardParser().parse_text(data["text"])
        score = score_draft(draft)

        return jsonify({
            "success": True,
            "data": {
                "fields": draft.to_dict(),
                "score": score,
                "needs_review": score < Config.REVIEW_SCORE_THRESHOLD
            }
        }), 200

    except Exception as e:
        logger.error(f"Error parsing text: {str(e)}")
        return jsonify({
            "success": False,
            "error": str(e)
        }), 500


# Error handlers
@api_bp.errorhandler(400)
def bad_request(error):
    """Handle 400 errors."""
    return jsonify({
        "success": False,
        "error": "Bad request"
    }), 400


@api_bp.errorhandler(404)
def not_found(error):
    """Handle 404 errors."""
    return jsonify({
        "success": False,
        "error": "Resource not found"
    }), 404


@api_bp.errorhandler(500)
def internal_error(error):
    """Handle 500 errors."""
    return jsonify({
        "success": False,
        "error": "Internal server error"
    }), 500
