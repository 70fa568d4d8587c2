from flask import jsonify, request
from flask_login import current_user, login_required

from finquest_app.core.error_handlers import ValidationError, success_response

from ..interface import GamingInterface
from . import gaming_api_bp


def _json_body() -> dict:
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError('Request body must be a JSON object')
    return data


def _optional_int(data: dict, key: str):
    value = data.get(key)
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(f'{key} must be an integer', errors={key: value})
    return value


@gaming_api_bp.route('/sessions', methods=['POST'])
@login_required
def start_session_api():
    """Start a quiz session: {"level": 1}. Sessions served over HTTP are always standard-size."""
    data = _json_body()
    if 'level' not in data:
        raise ValidationError('level is required', errors={'level': 'required'})

    result = GamingInterface.start_session(current_user.get_id(), data['level'])
    return jsonify(success_response(result.to_dict())), 201


@gaming_api_bp.route('/sessions/<session_id>/answers', methods=['POST'])
@login_required
def submit_answer_api(session_id):
    """Grade one answer. Any client-sent correct answer is ignored."""
    data = _json_body()
    errors = {}
    if data.get('question_id') is None:
        errors['question_id'] = 'required'
    if not isinstance(data.get('selected_answer'), str):
        errors['selected_answer'] = 'must be a string'
    if errors:
        raise ValidationError('Invalid answer submission', errors=errors)

    result = GamingInterface.submit_answer(
        current_user.get_id(),
        session_id,
        data['question_id'],
        data['selected_answer'],
    )
    return jsonify(success_response(result.to_dict()))


@gaming_api_bp.route('/sessions/<session_id>/complete', methods=['POST'])
@login_required
def complete_session_api(session_id):
    data = _json_body()
    result = GamingInterface.complete_session(
        current_user.get_id(),
        session_id,
        _optional_int(data, 'final_score'),
    )
    return jsonify(success_response(result.to_dict()))


@gaming_api_bp.route('/sessions/<session_id>', methods=['GET'])
@login_required
def get_session_api(session_id):
    return jsonify(success_response(GamingInterface.get_session(current_user.get_id(), session_id)))


@gaming_api_bp.route('/sessions', methods=['GET'])
@login_required
def session_history_api():
    limit = request.args.get('limit', 20, type=int)
    limit = max(1, min(limit, 100))
    return jsonify(success_response(GamingInterface.get_session_history(current_user.get_id(), limit)))


@gaming_api_bp.route('/progress', methods=['GET'])
@login_required
def get_progress_api():
    return jsonify(success_response(GamingInterface.get_progress(current_user.get_id())))


@gaming_api_bp.route('/progress/reset', methods=['POST'])
@login_required
def reset_progress_api():
    result = GamingInterface.reset_if_due(current_user.get_id())
    return jsonify(success_response(result.to_dict()))


@gaming_api_bp.route('/levels/<int:level>/questions/count', methods=['GET'])
@login_required
def count_questions_api(level):
    return jsonify(success_response(GamingInterface.count_questions(level)))
