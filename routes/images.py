from flask import Blueprint, current_app, send_from_directory

images_bp = Blueprint('images', __name__, url_prefix='/images')

@images_bp.route('/<path:filename>')
def serve_image(filename):
    # send_from_directory refuses paths outside IMAGE_FOLDER
    return send_from_directory(current_app.config['IMAGE_FOLDER'], filename)
