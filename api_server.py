#!/usr/bin/env python3
"""
Triangle Warp API Server
Upload a source image once, then post destination triangles as the corners
move; every post re-runs the full warp and returns the new raster.
"""

import os
import logging
from io import BytesIO
from typing import Dict
from dotenv import load_dotenv

# Load environment variables first
load_dotenv()

from flask import Flask, request, jsonify, send_file
from flask_cors import CORS

# --- Centralized Logging Configuration ---
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)-25s - %(levelname)-8s - %(message)s',
    datefmt='%H:%M:%S'
)

from triwarp.models.errors import WarpError
from triwarp.models.warp_options import WarpOptions
from triwarp.pipeline.warp_session import WarpSession
from triwarp.repositories.triangle_repository import TriangleRepository
from triwarp.services.preview_service import PreviewService
from triwarp.services.raster_service import RasterService

app = Flask(__name__)
CORS(app)  # Enable CORS for frontend communication

# Configuration
ALLOWED_EXTENSIONS = set(os.getenv("ALLOWED_EXTENSIONS", "png,jpg,jpeg,gif,bmp,webp,tif,tiff").split(","))
MAX_CONTENT_LENGTH = int(os.getenv("MAX_UPLOAD_SIZE_MB", "20")) * 1024 * 1024

app.config['MAX_CONTENT_LENGTH'] = MAX_CONTENT_LENGTH

# Initialize services
raster_service = RasterService()
preview_service = PreviewService()

logger = logging.getLogger(__name__)

# Session storage for warp state
sessions: Dict[str, WarpSession] = {}


def allowed_file(filename: str) -> bool:
    """Check if file extension is allowed."""
    return '.' in filename and filename.rsplit('.', 1)[1].lower() in ALLOWED_EXTENSIONS


def warp_error_response(e: WarpError):
    logger.warning(f"Warp rejected: {type(e).__name__}: {e}")
    return jsonify({'success': False, 'error': type(e).__name__, 'message': str(e)}), 422


def json_payload():
    """JSON object body of the request, or None for anything else."""
    payload = request.get_json(silent=True)
    if payload is None:
        return {}
    return payload if isinstance(payload, dict) else None


def get_session(session_id):
    if not isinstance(session_id, str) or session_id not in sessions:
        return None
    return sessions[session_id]


def png_response(buffer):
    return send_file(BytesIO(raster_service.to_png_bytes(buffer)), mimetype='image/png')


@app.route('/api/load-source', methods=['POST'])
def load_source():
    """Load a source image and its triangle into a new session."""
    if 'source_image' not in request.files:
        return jsonify({'success': False, 'message': 'No source image provided'}), 400

    file = request.files['source_image']
    if file.filename == '' or not allowed_file(file.filename):
        return jsonify({'success': False, 'message': 'Unsupported or missing file'}), 400

    try:
        source_triangle = TriangleRepository.from_text(request.form.get('source_triangle', ''))
        options = WarpOptions.from_dict({
            key: request.form[key] for key in request.form
            if key not in ('source_triangle', 'width', 'height')
        })
        source = raster_service.decode(file.read())
        width = int(request.form.get('width') or source.width)
        height = int(request.form.get('height') or source.height)
        if width <= 0 or height <= 0:
            return jsonify({'success': False, 'message': f'Destination size must be positive, got {width}x{height}'}), 400
    except WarpError as e:
        return warp_error_response(e)
    except ValueError as e:
        return jsonify({'success': False, 'message': f'Error loading source: {e}'}), 400

    session = WarpSession(source, source_triangle, width, height, options)
    sessions[session.session_id] = session
    logger.info(f"Session {session.session_id}: source {source.width}x{source.height}, "
                f"destination {width}x{height}")

    return jsonify({
        'success': True,
        'session_id': session.session_id,
        'source_size': [source.width, source.height],
        'destination_size': [width, height],
        'source_triangle': TriangleRepository.retrieve_coords(source_triangle),
    })


@app.route('/api/warp', methods=['POST'])
def warp():
    """Recompute the warp for a new destination triangle."""
    payload = json_payload()
    if payload is None:
        return jsonify({'success': False, 'message': 'Request body must be a JSON object'}), 400
    session = get_session(payload.get('session_id'))
    if session is None:
        return jsonify({'success': False, 'message': 'Invalid session'}), 400

    try:
        triangle_payload = payload.get('destination_triangle')
        if isinstance(triangle_payload, str):
            destination_triangle = TriangleRepository.from_text(triangle_payload)
        else:
            destination_triangle = TriangleRepository.from_json(triangle_payload)
        result = session.recompute(destination_triangle)
    except WarpError as e:
        return warp_error_response(e)

    return jsonify({
        'success': True,
        'session_id': session.session_id,
        'destination_triangle': TriangleRepository.retrieve_coords(destination_triangle),
        'image': raster_service.to_data_url(result),
    })


@app.route('/api/image/<session_id>')
def serve_image(session_id):
    """Serve the last warped raster of a session."""
    session = get_session(session_id)
    if session is None or session.last_result is None:
        return jsonify({'error': 'Image not found'}), 404
    return png_response(session.last_result)


@app.route('/api/preview/<session_id>')
def serve_preview(session_id):
    """Serve the source viewport preview of a session."""
    session = get_session(session_id)
    if session is None or session.source is None:
        return jsonify({'error': 'Session not found'}), 404
    try:
        preview = preview_service.render(session.source, session.source_triangle)
    except WarpError as e:
        return warp_error_response(e)
    return png_response(preview)


@app.route('/api/health', methods=['GET'])
def health_check():
    """Health check endpoint."""
    return jsonify({
        'status': 'healthy',
        'message': 'Triangle Warp API is running',
        'active_sessions': len(sessions)
    })


@app.route('/api/clear-session', methods=['POST'])
def clear_session():
    """Clear a session and free memory."""
    payload = json_payload()
    if payload is None:
        return jsonify({'success': False, 'message': 'Request body must be a JSON object'}), 400
    session_id = payload.get('session_id')
    if get_session(session_id) is not None:
        sessions.pop(session_id).clear()
        return jsonify({'success': True, 'message': 'Session cleared'})
    return jsonify({'success': False, 'message': 'Session not found'})


@app.errorhandler(413)
def too_large(e):
    """Handle file too large error."""
    return jsonify({'error': f'File too large. Maximum size is {MAX_CONTENT_LENGTH // (1024 * 1024)}MB.'}), 413


@app.errorhandler(500)
def internal_error(e):
    """Handle internal server error."""
    logger.error(f"Internal server error: {e}")
    return jsonify({'error': 'Internal server error'}), 500


def main():
    port = int(os.getenv("API_PORT", "5000"))
    print("🚀 Starting Triangle Warp API Server...")
    print(f"🔧 Max upload size: {MAX_CONTENT_LENGTH // (1024 * 1024)}MB")
    print("🌐 CORS enabled for frontend communication")
    print("📋 Endpoints:")
    print("   1. /api/load-source")
    print("   2. /api/warp")
    print("   3. /api/image/<session_id>, /api/preview/<session_id>")
    print("=" * 60)
    app.run(host='0.0.0.0', port=port, debug=os.getenv("API_DEBUG", "false").lower() == "true")


if __name__ == '__main__':
    main()
