"""
Tagger Web Dashboard

A Flask application providing a web interface for training a trigram HMM
tagger on the Brown corpus, tagging sentences and inspecting the
suffix-based estimates for unknown words.
"""

import threading
from typing import Dict, List, Optional

from flask import Flask, render_template, jsonify, request

from tritag import HMMTagger, Model, TaggerConfig, build_tagger
from tritag.config import validate_config
from tritag.corpus import load_brown_tagged, get_brown_categories
from tritag.errors import TaggerError
from tritag.model import FrequencyCollector
from tritag.suffix import UnknownHandler, word_class


app = Flask(__name__)

# Global state
model: Optional[Model] = None
tagger: Optional[HMMTagger] = None
training_status: Dict = {
    'is_training': False,
    'progress': 0,
    'total': 100,
    'stage': 'idle',
    'message': '',
    'error': None,
    'stats': None
}
training_lock = threading.Lock()


def train_model_async(categories: Optional[List[str]], tagset: Optional[str],
                      config: TaggerConfig):
    """Train model in background thread."""
    global model, tagger

    try:
        with training_lock:
            training_status['is_training'] = True
            training_status['progress'] = 0
            training_status['stage'] = 'loading'
            training_status['message'] = 'Loading Brown corpus...'
            training_status['error'] = None

        sentences, corpus_stats = load_brown_tagged(categories=categories, tagset=tagset)

        with training_lock:
            training_status['stage'] = 'collecting'
            training_status['message'] = f'Loaded {corpus_stats["num_sentences"]:,} sentences'
            training_status['progress'] = 10

        total = len(sentences)

        def progress_callback(current):
            with training_lock:
                # Map progress to 10-90 range
                training_status['progress'] = 10 + int((current / max(total, 1)) * 80)
                training_status['message'] = f'Collecting frequencies: {current:,}/{total:,}'

        collector = FrequencyCollector()
        collector.process_all(sentences, progress_callback=progress_callback)
        new_model = collector.model()

        with training_lock:
            training_status['stage'] = 'building'
            training_status['message'] = 'Building tagger...'
            training_status['progress'] = 90

        new_tagger = build_tagger(config, new_model)

        model, tagger = new_model, new_tagger

        with training_lock:
            training_status['progress'] = 100
            training_status['stage'] = 'complete'
            training_status['message'] = 'Training complete!'
            training_status['stats'] = new_model.summary()
            training_status['is_training'] = False

    except Exception as e:
        with training_lock:
            training_status['error'] = str(e)
            training_status['is_training'] = False
            training_status['stage'] = 'error'
            training_status['message'] = f'Error: {str(e)}'


@app.route('/')
def index():
    """Render main dashboard."""
    categories = get_brown_categories()
    unknown_handlers = [h.value for h in UnknownHandler]
    return render_template('index.html',
                           categories=categories,
                           unknown_handlers=unknown_handlers)


@app.route('/api/train', methods=['POST'])
def api_train():
    """Start model training."""
    with training_lock:
        if training_status['is_training']:
            return jsonify({'error': 'Training already in progress'}), 400

    data = request.json or {}
    categories = data.get('categories', None)
    tagset = data.get('tagset', 'universal')
    try:
        config = TaggerConfig(
            unknown_handler=data.get('unknown_handler', 'lookup'),
            beam_factor=float(data.get('beam_factor', 1000.0)),
        )
        validate_config(config)
    except (TypeError, ValueError) as e:
        return jsonify({'error': str(e)}), 400

    thread = threading.Thread(
        target=train_model_async,
        args=(categories, None if tagset == 'brown' else tagset, config)
    )
    thread.daemon = True
    thread.start()

    return jsonify({'message': 'Training started'})


@app.route('/api/status')
def api_status():
    """Get training status."""
    with training_lock:
        return jsonify(training_status)


@app.route('/api/model/info')
def api_model_info():
    """Get model information."""
    if model is None or tagger is None:
        return jsonify({'error': 'No model trained'}), 400

    params = tagger.trigram_model.parameters
    return jsonify({
        'stats': model.summary(),
        'tags': model.tag_numberer.labels,
        'lambdas': [params.l1, params.l2, params.l3],
        'beam_factor': tagger.beam_factor,
    })


@app.route('/api/tag', methods=['POST'])
def api_tag():
    """Tag a sentence."""
    if tagger is None:
        return jsonify({'error': 'No model trained'}), 400

    data = request.json or {}
    sentence = data.get('sentence', '')
    tokens = sentence.split() if isinstance(sentence, str) else list(sentence)

    if not tokens:
        return jsonify({'error': 'No sentence provided'}), 400

    try:
        tags, prob = tagger.tag(tokens)
    except TaggerError as e:
        return jsonify({'error': str(e)}), 400

    lexicon = model.word_tag_freqs
    return jsonify({
        'tokens': [
            {'word': word, 'tag': tag, 'known': word in lexicon or word.lower() in lexicon}
            for word, tag in zip(tokens, tags)
        ],
        'log_probability': prob
    })


@app.route('/api/suffix')
def api_suffix():
    """Get the unknown word distribution of a word."""
    if tagger is None:
        return jsonify({'error': 'No model trained'}), 400

    word = request.args.get('word', '')
    if not word:
        return jsonify({'error': 'No word provided'}), 400

    handler = tagger.word_handler.fallback
    probs = handler.tag_probs(word)
    numberer = model.tag_numberer

    return jsonify({
        'word': word,
        'class': word_class(word).value,
        'tags': [
            {'tag': numberer.label(tag.tag), 'capital': tag.capital, 'log_probability': prob}
            for tag, prob in sorted(probs.items(), key=lambda item: item[1], reverse=True)
        ]
    })


if __name__ == '__main__':
    import argparse

    parser = argparse.ArgumentParser(description='Tagger Web Dashboard')
    parser.add_argument('--host', default='127.0.0.1', help='Host to bind to')
    parser.add_argument('--port', type=int, default=5000, help='Port to bind to')
    parser.add_argument('--debug', action='store_true', help='Enable debug mode')

    args = parser.parse_args()

    print(f"\n🌐 Starting Tagger Dashboard")
    print(f"   Open http://{args.host}:{args.port} in your browser\n")

    app.run(host=args.host, port=args.port, debug=args.debug, threaded=True)
