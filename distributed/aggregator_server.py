"""
Aggregator HTTP server
Collects Groth16 proofs and returns aggregate proofs
"""

import logging

from flask import Flask, request, jsonify

from agg_prover import ProofAggregator
from distributed.config import config
from distributed.serialization import (
    deserialize_bytes,
    deserialize_groth16_proofs,
    serialize_aggregate_proof,
    serialize_verifier_srs,
)
from snarkpack.errors import InvalidInputError, SerializationError
from snarkpack.groups import setup
from snarkpack.srs import setup_fake_srs

logger = logging.getLogger(__name__)

app = Flask(__name__)

# Global state
aggregator_state = {
    'group': None,
    'curve': None,
    'aggregator': None,
    'initialized': False
}


@app.route('/health', methods=['GET'])
def health():
    return jsonify({'status': 'ok', 'initialized': aggregator_state['initialized']})


@app.route('/init', methods=['POST'])
def init():
    """Generate a development SRS supporting up to ``size`` proofs"""
    if not config.dev_mode:
        return jsonify({'success': False, 'error': 'SRS generation is only available in dev mode'}), 403

    try:
        data = request.get_json(silent=True) or {}
        curve = data.get('curve', config.pairing_curve)
        size = int(data.get('size', config.srs_size))

        group = setup(curve)['group']
        logger.warning("aggregator: generating SRS from local secrets (DEV MODE), size %d", size)
        aggregator = ProofAggregator(setup_fake_srs(group, size))

        aggregator_state['group'] = group
        aggregator_state['curve'] = curve
        aggregator_state['aggregator'] = aggregator
        aggregator_state['initialized'] = True

        return jsonify({
            'success': True,
            'curve': curve,
            'verifier_srs': serialize_verifier_srs(aggregator.verifier_srs()),
        })
    except (InvalidInputError, ValueError) as e:
        return jsonify({'success': False, 'error': str(e)}), 400
    except Exception as e:
        logger.exception("aggregator init failed")
        return jsonify({'success': False, 'error': str(e)}), 500


@app.route('/get_verifier_srs', methods=['GET'])
def get_verifier_srs():
    if not aggregator_state['initialized']:
        return jsonify({'success': False, 'error': 'Aggregator not initialized'}), 400

    return jsonify({
        'success': True,
        'curve': aggregator_state['curve'],
        'verifier_srs': serialize_verifier_srs(aggregator_state['aggregator'].verifier_srs()),
    })


@app.route('/aggregate', methods=['POST'])
def aggregate():
    """Aggregate a batch of Groth16 proofs"""
    if not aggregator_state['initialized']:
        return jsonify({'success': False, 'error': 'Aggregator not initialized'}), 400

    try:
        data = request.json
        group = aggregator_state['group']

        proofs = deserialize_groth16_proofs(data['proofs'], group)
        transcript_include = deserialize_bytes(data.get('transcript_include', ''))
        pad = bool(data.get('pad', False))

        proof = aggregator_state['aggregator'].aggregate(proofs, transcript_include, pad)
        logger.info("aggregator: aggregated %d proofs", proof.nproofs)

        return jsonify({
            'success': True,
            'nproofs': proof.nproofs,
            'proof': serialize_aggregate_proof(proof, group),
        })
    except (InvalidInputError, SerializationError, KeyError) as e:
        return jsonify({'success': False, 'error': str(e)}), 400
    except Exception as e:
        logger.exception("aggregation failed")
        return jsonify({'success': False, 'error': str(e)}), 500


def main():
    """Start the aggregator server"""
    logging.basicConfig(level=config.log_level,
                        format='%(asctime)s %(levelname)s %(name)s: %(message)s')
    host = config.aggregator_host
    port = config.aggregator_port
    logger.info("Starting aggregator server on %s:%d", host, port)
    app.run(host=host, port=port, debug=False)


if __name__ == '__main__':
    main()
