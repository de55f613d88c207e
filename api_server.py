#!/usr/bin/env python3
"""
Undertone Color Matcher API Server
Upload a photo, get back its skin undertone and the colors that suit it.
"""

import os
import logging
from dotenv import load_dotenv

# Load environment variables first
load_dotenv()

from flask import Flask, request, jsonify
from flask_cors import CORS
from werkzeug.exceptions import HTTPException

# --- Centralized Logging Configuration ---
logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format='%(asctime)s - %(name)-25s - %(levelname)-8s - %(message)s',
    datefmt='%H:%M:%S'
)

# Import services and models
from undertone_matcher.models.errors import EmptySkinSetError, InvalidInputError
from undertone_matcher.models.undertone import Undertone
from undertone_matcher.pipeline.undertone_analyzer import analyze_image
from undertone_matcher.services.image_service import ImageService
from undertone_matcher.services.recommendation_service import RecommendationService
from undertone_matcher.services.undertone_service import UndertoneService

app = Flask(__name__)
CORS(app)  # Enable CORS for frontend communication

# Configuration
MAX_UPLOAD_SIZE_MB = int(os.getenv("MAX_UPLOAD_SIZE_MB", "20"))
app.config['MAX_CONTENT_LENGTH'] = MAX_UPLOAD_SIZE_MB * 1024 * 1024

# Initialize services
image_service = ImageService()
undertone_service = UndertoneService()
recommendation_service = RecommendationService()

logger = logging.getLogger(__name__)

NO_UNDERTONE_MESSAGE = "No undertone could be determined from the supplied image"


@app.route('/api/analyze', methods=['POST'])
def analyze():
    """Classify the undertone of an uploaded photo and return its palette."""
    try:
        if 'image' not in request.files:
            return jsonify({'success': False, 'message': 'No image provided'}), 400

        file = request.files['image']
        if file.filename == '':
            return jsonify({'success': False, 'message': 'No file selected'}), 400
        if not image_service.is_allowed(file.filename):
            return jsonify({'success': False, 'message': f'Unsupported file type: {file.filename}'}), 400

        image = image_service.decode(file.read(), file.filename)
        logger.info(f"Image decoded: {image.pixels.shape}")

        report = analyze_image(
            image,
            undertone_service=undertone_service,
            recommendation_service=recommendation_service,
        )
        return jsonify({'success': True, **report.to_dict()})

    except EmptySkinSetError as e:
        logger.info(f"Undetermined undertone: {e}")
        return jsonify({
            'success': False,
            'undertone': None,
            'message': NO_UNDERTONE_MESSAGE,
            'total_pixel_count': e.total_pixel_count,
        }), 422
    except InvalidInputError as e:
        return jsonify({'success': False, 'message': str(e)}), 400
    except HTTPException:
        raise  # e.g. 413 from MAX_CONTENT_LENGTH, handled below
    except Exception as e:
        logger.exception(f"Analysis error: {e}")
        return jsonify({'success': False, 'message': 'Error analysing image'}), 500


@app.route('/api/recommendations', methods=['GET'])
def list_recommendations():
    """Every palette, keyed by undertone."""
    table = recommendation_service.get_all()
    return jsonify({
        'recommendations': {u.value: rec.to_dict() for u, rec in table.items()},
        'tips': list(recommendation_service.get_tips()),
    })


@app.route('/api/recommendations/<undertone>', methods=['GET'])
def get_recommendation(undertone):
    """Static palette for one undertone."""
    try:
        recommendation = recommendation_service.get_recommendation(undertone)
    except InvalidInputError as e:
        return jsonify({'error': str(e)}), 404
    return jsonify({
        **recommendation.to_dict(),
        'tips': list(recommendation_service.get_tips()),
    })


@app.route('/api/health', methods=['GET'])
def health_check():
    """Health check endpoint."""
    return jsonify({
        'status': 'healthy',
        'message': 'Undertone Color Matcher API is running',
        'undertones': [u.value for u in Undertone],
    })


@app.errorhandler(413)
def too_large(e):
    """Handle file too large error."""
    limit = app.config["MAX_CONTENT_LENGTH"]
    return jsonify({
        'error': f'File too large. Maximum upload size is {limit} bytes.',
        'max_bytes': limit,
    }), 413


@app.errorhandler(404)
def not_found(e):
    """Handle unknown route."""
    return jsonify({'error': 'Not found'}), 404


@app.errorhandler(400)
def bad_request(e):
    """Handle bad request error."""
    return jsonify({'error': 'Bad request'}), 400


@app.errorhandler(500)
def internal_error(e):
    """Handle internal server error."""
    logger.error(f"Internal server error: {e}")
    return jsonify({'error': 'Internal server error'}), 500


def main():
    logger.info("Starting Undertone Color Matcher API Server...")
    logger.info(f"Max upload size: {MAX_UPLOAD_SIZE_MB}MB")
    app.run(
        debug=os.getenv("FLASK_DEBUG", "0") == "1",
        host=os.getenv("API_SERVER_HOST", "0.0.0.0"),
        port=int(os.getenv("API_SERVER_PORT", "5002")),
    )


if __name__ == '__main__':
    main()
