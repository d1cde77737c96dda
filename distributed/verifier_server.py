"""
Verifier HTTP server
Checks aggregate proofs against a verifier SRS and a Groth16 verifying key
"""

import logging

from flask import Flask, request, jsonify

from agg_verifier import AggregateVerifier
from distributed.config import config
from distributed.serialization import (
    deserialize_bytes,
    deserialize_public_inputs,
    deserialize_verifier_srs,
    deserialize_verifying_key,
)
from snarkpack.errors import InvalidInputError, SerializationError
from snarkpack.groups import setup

logger = logging.getLogger(__name__)

app = Flask(__name__)

# Global state
verifier_state = {
    'group': None,
    'verifier': None,
    'initialized': False
}


@app.route('/health', methods=['GET'])
def health():
    return jsonify({'status': 'ok', 'initialized': verifier_state['initialized']})


@app.route('/init', methods=['POST'])
def init():
    """Install the verifier SRS and the verifying key"""
    try:
        data = request.json
        curve = data.get('curve', config.pairing_curve)
        group = setup(curve)['group']

        vk_srs = deserialize_verifier_srs(data['verifier_srs'], group)
        vk = deserialize_verifying_key(data['verifying_key'], group)

        verifier_state['group'] = group
        verifier_state['verifier'] = AggregateVerifier(vk_srs, vk)
        verifier_state['initialized'] = True
        logger.info("verifier: initialized for %d proofs, %d public inputs", vk_srs.n, vk.num_inputs)

        return jsonify({'success': True})
    except (SerializationError, ValueError, KeyError) as e:
        return jsonify({'success': False, 'error': str(e)}), 400
    except Exception as e:
        logger.exception("verifier init failed")
        return jsonify({'success': False, 'error': str(e)}), 500


@app.route('/verify', methods=['POST'])
def verify():
    """Verify an aggregate proof"""
    if not verifier_state['initialized']:
        return jsonify({'success': False, 'error': 'Verifier not initialized'}), 400

    try:
        data = request.json
        proof_bytes = deserialize_bytes(data['proof'])
        public_inputs = deserialize_public_inputs(data['public_inputs'])
        transcript_include = deserialize_bytes(data.get('transcript_include', ''))
        pad = bool(data.get('pad', False))

        is_valid = verifier_state['verifier'].verify_bytes(
            proof_bytes, public_inputs, transcript_include, pad)
        logger.info("verifier: aggregate proof of %d inputs valid=%s", len(public_inputs), is_valid)

        return jsonify({'success': True, 'is_valid': is_valid})
    except (InvalidInputError, SerializationError, KeyError, ValueError) as e:
        return jsonify({'success': False, 'error': str(e)}), 400
    except Exception as e:
        logger.exception("verification failed")
        return jsonify({'success': False, 'error': str(e)}), 500


def main():
    """Start the verifier server"""
    logging.basicConfig(level=config.log_level,
                        format='%(asctime)s %(levelname)s %(name)s: %(message)s')
    host = config.verifier_host
    port = config.verifier_port
    logger.info("Starting verifier server on %s:%d", host, port)
    app.run(host=host, port=port, debug=False)


if __name__ == '__main__':
    main()
