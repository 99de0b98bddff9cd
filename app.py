from flask import Flask, Response, jsonify, request
from flask_migrate import Migrate
from werkzeug.utils import secure_filename
import logging

from config import get_config
from constants import MAX_MULTIPLIER, MIN_MULTIPLIER
from models import db, Ingredient, Recipe
from services import (
    SqlRecipeRepository,
    decode_recipes,
    encode_recipe,
    encode_recipes,
    format_decimal,
    generate_grocery_list,
)

# Security utilities
from utils.image_handler import validate_and_process_image, ImageValidationError

app = Flask(__name__)
app.config.from_object(get_config())

logging.basicConfig(
    level=getattr(logging, app.config['LOG_LEVEL'], logging.INFO),
    format=app.config['LOG_FORMAT']
)
logger = logging.getLogger(__name__)

db.init_app(app)
migrate = Migrate(app, db)


def allowed_file(filename):
    return '.' in filename and filename.rsplit('.', 1)[1].lower() in app.config['ALLOWED_EXTENSIONS']


def safe_int(value, default=1, min_val=None, max_val=None):
    """Safely parse an integer value with optional bounds."""
    try:
        result = int(value) if value else default
        if min_val is not None:
            result = max(min_val, result)
        if max_val is not None:
            result = min(max_val, result)
        return result
    except (ValueError, TypeError):
        return default


def text_attachment(text, filename):
    """Plain-text download response."""
    return Response(
        text,
        mimetype='text/plain',
        headers={'Content-Disposition': f'attachment; filename="{filename}"'}
    )


def recipe_summary(record):
    return {
        'id': record.id,
        'name': record.name,
        'cooking_time': record.cooking_time,
        'servings': record.servings,
        'tags': record.tag_list,
        'has_image': record.has_image,
    }


def optional_int(name):
    """Integer query-string argument, or None when absent or not a number."""
    return safe_int(request.args.get(name), default=None)


def record_detail(record):
    return {
        'id': record.id,
        'name': record.name,
        'cooking_time': record.cooking_time,
        'servings': record.servings,
        'tags': record.tag_list,
        'notes': record.notes,
        'instructions': record.instructions,
        'created': record.created.isoformat() if record.created else None,
        'modified': record.modified.isoformat() if record.modified else None,
        'ingredients': [
            {
                'name': line.name,
                'quantity': format_decimal(line.quantity) if line.quantity is not None else None,
                'unit': line.base_unit,
                'modifier': line.modifier,
            }
            for line in record.ingredients
        ],
    }


# ============================================
# ROUTES - RECIPES
# ============================================

@app.route('/')
def index():
    """Recipe list, narrowed by any of the query-string filters."""
    criteria = {
        'search': request.args.get('q', '').strip() or None,
        'min_cooking_time': optional_int('min_time'),
        'max_cooking_time': optional_int('max_time'),
        'min_servings': optional_int('min_servings'),
        'max_servings': optional_int('max_servings'),
        'tags': [tag for tag in request.args.getlist('tag') if tag.strip()],
        'ingredient_ids': [
            ingredient_id for ingredient_id in
            (safe_int(value, default=None) for value in request.args.getlist('ingredient'))
            if ingredient_id is not None
        ],
    }

    repository = SqlRecipeRepository()
    if any(value not in (None, []) for value in criteria.values()):
        records = repository.filter(**criteria)
    else:
        records = repository.list_all()
    return jsonify([recipe_summary(record) for record in records])


@app.route('/tags')
def tags_list():
    return jsonify(SqlRecipeRepository().list_tags())


@app.route('/ingredients')
def ingredients_list():
    ingredients = Ingredient.query.order_by(Ingredient.name).all()
    return jsonify([{'id': i.id, 'name': i.name} for i in ingredients])


@app.route('/recipe/<int:id>')
def recipe_view(id):
    record = SqlRecipeRepository().fetch_by_id(id)
    if record is None:
        return jsonify({'error': f'Recipe {id} not found'}), 404
    return jsonify(record_detail(record))


@app.route('/recipe/<int:id>/edit', methods=['POST'])
def recipe_edit(id):
    """Replace a recipe with the single recipe block posted in the text field."""
    db.get_or_404(Recipe, id)

    records, errors = decode_recipes(request.form.get('text', ''))
    if errors or len(records) != 1:
        return jsonify({'errors': errors or ['Expected exactly one recipe']}), 400

    repository = SqlRecipeRepository()
    repository.update(id, records[0], remove_image=request.form.get('remove_image') == '1')
    db.session.commit()
    return jsonify(record_detail(repository.fetch_by_id(id)))


@app.route('/recipe/<int:id>/delete', methods=['POST'])
def recipe_delete(id):
    recipe = db.get_or_404(Recipe, id)
    name = recipe.name
    db.session.delete(recipe)
    db.session.commit()
    logger.info("Deleted recipe %r", name)
    return jsonify({'deleted': id, 'name': name})


# ============================================
# ROUTES - IMPORT / EXPORT
# ============================================

@app.route('/recipe/import', methods=['POST'])
def recipe_import():
    """Import recipes from a text field or an uploaded .txt file."""
    text = request.form.get('text', '')
    upload = request.files.get('file')
    if upload and upload.filename:
        text = upload.read().decode(app.config['IMPORT_ENCODING'], errors='replace')

    records, errors = decode_recipes(text)

    repository = SqlRecipeRepository()
    imported = []
    for record in records:
        recipe_id = repository.save(record)
        imported.append({'id': recipe_id, 'name': record.name})
    db.session.commit()

    logger.info("Imported %d recipe(s) with %d error(s)", len(imported), len(errors))
    status = 200 if imported else 400
    return jsonify({'imported': imported, 'errors': errors}), status


@app.route('/recipe/export')
def recipes_export():
    records = SqlRecipeRepository().list_all()
    return text_attachment(encode_recipes(records), 'recipes.txt')


@app.route('/recipe/<int:id>/export')
def recipe_export(id):
    record = SqlRecipeRepository().fetch_by_id(id)
    if record is None:
        return jsonify({'error': f'Recipe {id} not found'}), 404
    filename = secure_filename(f"{record.name}.txt") or 'recipe.txt'
    return text_attachment(encode_recipe(record), filename)


# ============================================
# ROUTES - IMAGES
# ============================================

@app.route('/recipe/<int:id>/upload-image', methods=['POST'])
def recipe_upload_image(id):
    recipe = db.get_or_404(Recipe, id)

    file = request.files.get('image')
    if file is None or file.filename == '':
        return jsonify({'error': 'No image selected'}), 400

    if not allowed_file(file.filename):
        return jsonify({'error': 'Invalid file type. Use PNG, JPG, GIF, or WEBP.'}), 400

    try:
        # Re-encode through PIL (strips malicious content, always JPEG)
        image_bytes, content_type = validate_and_process_image(file, max_side=app.config['IMAGE_MAX_SIDE'])
    except ImageValidationError as e:
        return jsonify({'error': f'Invalid image: {str(e)}'}), 400

    recipe.image_data = image_bytes
    recipe.image_content_type = content_type
    db.session.commit()
    return jsonify({'id': id, 'content_type': content_type, 'size': len(image_bytes)})


@app.route('/recipe/<int:id>/image')
def recipe_image(id):
    recipe = db.get_or_404(Recipe, id)
    if recipe.image_data is None:
        return jsonify({'error': 'Recipe has no image'}), 404
    return Response(recipe.image_data, mimetype=recipe.image_content_type or 'image/jpeg')


# ============================================
# ROUTES - SHOPPING LIST
# ============================================

@app.route('/shopping/generate', methods=['POST'])
def shopping_generate():
    """Grocery list for the selected recipes, scaled by multiplier_<id> fields."""
    selections = {}
    for value in request.form.getlist('recipes'):
        recipe_id = safe_int(value, default=None)
        if recipe_id is None:
            continue
        selections[recipe_id] = safe_int(
            request.form.get(f'multiplier_{recipe_id}'),
            default=1, min_val=MIN_MULTIPLIER, max_val=MAX_MULTIPLIER
        )

    report = generate_grocery_list(selections, SqlRecipeRepository())
    return Response(report, mimetype='text/plain')


# ============================================
# INITIALIZE DATABASE
# ============================================

def init_db():
    with app.app_context():
        # Enable SQLite foreign key enforcement
        from sqlalchemy import event
        from sqlalchemy.engine import Engine
        import sqlite3

        @event.listens_for(Engine, "connect")
        def set_sqlite_pragma(dbapi_connection, connection_record):
            if isinstance(dbapi_connection, sqlite3.Connection):
                cursor = dbapi_connection.cursor()
                cursor.execute("PRAGMA foreign_keys=ON")
                cursor.close()

        db.create_all()


if __name__ == '__main__':
    init_db()
    # host='0.0.0.0' allows access from other devices on the network
    app.run(debug=app.config.get('DEBUG', False), host='0.0.0.0', port=5000, use_reloader=False)
