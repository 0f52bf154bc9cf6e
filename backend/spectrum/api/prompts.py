from flask import Blueprint, jsonify, request, current_app


prompts = Blueprint('prompts', __name__)


def _store():
    return current_app.extensions['prompt_store']


@prompts.route('/', methods=['GET'])
def list_prompts():
    catalog = _store().get_catalog()
    category = request.args.get('category')
    items = catalog.prompts_by_category(category) if category else catalog.all_prompts
    return jsonify([p.to_dict() for p in items])


@prompts.route('/categories', methods=['GET'])
def list_categories():
    return jsonify(_store().get_catalog().categories)


@prompts.route('/stats', methods=['GET'])
def prompt_stats():
    return jsonify(_store().stats())


@prompts.route('/reload', methods=['POST'])
def reload_prompts():
    """
    Re-reads the prompt source. A failed reload keeps the previous catalog.
    """
    store = _store()
    if not store.reload():
        return jsonify({
            'success': False,
            'error': 'Prompt reload failed; previous prompts kept',
            'stats': store.stats(),
        }), 500
    current_app.logger.info(f"[prompts] reloaded via api total={store.stats()['total_prompts']}")
    return jsonify({'success': True, 'stats': store.stats()})
