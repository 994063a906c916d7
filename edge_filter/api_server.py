#!/usr/bin/env python3
"""
Sobel Edge Filter API Server
Upload an image, get back its black/grey/white edge map.
"""

import os
import logging
import uuid
import base64
from pathlib import Path
from io import BytesIO
from dotenv import load_dotenv

# Load environment variables first
load_dotenv()

from flask import Flask, request, jsonify, send_file, abort
from flask_cors import CORS
from werkzeug.utils import secure_filename
from PIL import Image as PILImage

# --- Centralized Logging Configuration ---
logging.basicConfig(
    level=getattr(logging, os.getenv("LOG_LEVEL", "INFO").upper(), logging.INFO),
    format='%(asctime)s - %(name)-25s - %(levelname)-8s - %(message)s',
    datefmt='%H:%M:%S'
)

# Import services and models
from .models.errors import DecodeError, EncodeError, InvalidImageSize
from .models.image import Image
from .pipeline.sobel_filter import detect_edges
from .services.image_service import ImageService

app = Flask(__name__)
CORS(app)  # Enable CORS for frontend communication

# Configuration
UPLOAD_FOLDER = os.getenv("UPLOAD_FOLDER", "data/temp_uploads")
RESULTS_FOLDER = os.getenv("RESULTS_FOLDER", "data/api_results")
ALLOWED_EXTENSIONS = {
    ext.strip().lower().lstrip(".")
    for ext in os.getenv("ALLOWED_EXTENSIONS", "png,jpg,jpeg,bmp,tif,tiff,webp").split(",")
    if ext.strip()
}
MAX_CONTENT_LENGTH = int(os.getenv("MAX_UPLOAD_SIZE_MB", "100")) * 1024 * 1024

app.config['UPLOAD_FOLDER'] = UPLOAD_FOLDER
app.config['MAX_CONTENT_LENGTH'] = MAX_CONTENT_LENGTH

# Ensure directories exist
Path(UPLOAD_FOLDER).mkdir(parents=True, exist_ok=True)
Path(RESULTS_FOLDER).mkdir(parents=True, exist_ok=True)

# Initialize services
image_service = ImageService()

logger = logging.getLogger(__name__)


def allowed_file(filename: str) -> bool:
    """Check if file extension is allowed."""
    return '.' in filename and filename.rsplit('.', 1)[1].lower() in ALLOWED_EXTENSIONS


def image_to_base64(image: Image) -> str:
    """Encode an edge map as a PNG data URL (lossless, so levels survive)."""
    buffer = BytesIO()
    PILImage.fromarray(image.pixels).save(buffer, format='PNG')
    base64_string = base64.b64encode(buffer.getvalue()).decode('utf-8')
    return f"data:image/png;base64,{base64_string}"


@app.route('/api/health', methods=['GET'])
def health():
    return jsonify({'status': 'ok'})


@app.route('/api/detect-edges', methods=['POST'])
def detect_edges_endpoint():
    """Run the Sobel edge filter on an uploaded image."""
    if 'image' not in request.files:
        return jsonify({'success': False, 'message': 'No image provided'}), 400

    file = request.files['image']
    if file.filename == '':
        return jsonify({'success': False, 'message': 'No file selected'}), 400
    if not allowed_file(file.filename):
        return jsonify({'success': False, 'message': 'File type not allowed'}), 400

    # Save uploaded file temporarily
    filename = secure_filename(file.filename)
    request_id = uuid.uuid4().hex
    temp_path = Path(UPLOAD_FOLDER) / f"upload_{request_id}_{filename}"
    file.save(str(temp_path))

    try:
        image = image_service.load(temp_path)
        logger.info(f"Uploaded image loaded: {image.width}x{image.height}")

        result_name = f"{Path(filename).stem}_{request_id}_edges.png"
        edges = detect_edges(image, output_path=Path(RESULTS_FOLDER) / result_name)
        image_service.save(edges)

        return jsonify({
            'success': True,
            'width': edges.width,
            'height': edges.height,
            'image': image_to_base64(edges),
            'url': f"/api/image/{result_name}",
        })

    except DecodeError as e:
        logger.error(f"Upload could not be decoded: {e}")
        return jsonify({'success': False, 'message': 'Image could not be decoded'}), 400
    except InvalidImageSize as e:
        logger.error(f"Upload too small: {e}")
        return jsonify({'success': False,
                        'message': f"Image is {e.width}x{e.height}; edge detection needs at least 3x3",
                        'width': e.width, 'height': e.height}), 422
    except EncodeError as e:
        logger.error(f"Edge map could not be saved: {e}")
        return jsonify({'success': False, 'message': 'Edge map could not be saved'}), 500
    finally:
        # Clean up temp file
        if temp_path.exists():
            temp_path.unlink()


@app.route('/api/image/<filename>', methods=['GET'])
def get_image(filename):
    """Serve a stored edge map."""
    path = Path(RESULTS_FOLDER) / secure_filename(filename)
    if not path.is_file():
        abort(404)
    return send_file(str(path.resolve()), mimetype='image/png')


@app.errorhandler(413)
def too_large(e):
    """Handle file too large error."""
    return jsonify({'error': f'File too large. Maximum size is {MAX_CONTENT_LENGTH // (1024*1024)}MB.'}), 413


@app.errorhandler(404)
def not_found(e):
    return jsonify({'error': 'Not found'}), 404


def main():
    logger.info("Starting Sobel Edge Filter API Server...")
    logger.info(f"Upload directory: {UPLOAD_FOLDER}")
    logger.info(f"Results directory: {RESULTS_FOLDER}")
    logger.info(f"Max upload size: {MAX_CONTENT_LENGTH // (1024*1024)}MB")
    app.run(host='0.0.0.0', port=int(os.getenv("API_SERVER_PORT", "5002")), threaded=True)


if __name__ == '__main__':
    main()
