"""
Aggregation Benchmark Plots
===========================

Turns the JSON written by aggregation_benchmark.py into charts:
- aggregation time against n, with an O(n) reference
- aggregate verification against one-by-one verification, with an
  O(log n) fit of the aggregate verifier
- aggregate proof size against n

Usage:
    python doc/aggregation_analysis.py [aggregation_results.json]
"""

import json
import sys

import matplotlib
matplotlib.use('Agg')
import matplotlib.pyplot as plt
import numpy as np


class AggregationAnalyzer:

    def __init__(self, results_file='aggregation_results.json'):
        try:
            with open(results_file, 'r') as f:
                data = json.load(f)
        except FileNotFoundError:
            sys.exit(f"results file not found: {results_file}; run aggregation_benchmark.py first")
        self.timing = data.get('timing', {})
        self.memory = data.get('memory', {})
        self.sizes = data.get('proof_size', {})

    @staticmethod
    def _series(data: dict, scale=1.0):
        n_values = sorted(int(k) for k in data)
        return np.array(n_values), np.array([data[str(n)] * scale for n in n_values])

    def plot_aggregation(self):
        data = self.timing.get('aggregation', {}).get('aggregate')
        if not data:
            print("no aggregation data")
            return
        n, t = self._series(data, 1000)

        fig, ax = plt.subplots(figsize=(10, 6))
        ax.plot(n, t, 'o-', linewidth=2, markersize=8, color='#2E86AB', label='aggregate')
        ax.plot(n, t[0] / n[0] * n, '--', color='#F18F01', alpha=0.7, label='O(n) reference')
        ax.set_xscale('log', base=2)
        ax.set_xlabel('Number of proofs (n)')
        ax.set_ylabel('Time (ms)')
        ax.set_title('Aggregation time')
        ax.grid(True, alpha=0.3)
        ax.legend()
        plt.tight_layout()
        plt.savefig('agg_prover_time.png', dpi=200, bbox_inches='tight')
        plt.close()
        print("saved agg_prover_time.png")

    def plot_verification(self):
        data = self.timing.get('aggregation', {})
        if not data.get('verify_aggregate'):
            print("no verification data")
            return
        n, agg = self._series(data['verify_aggregate'], 1000)
        _, single = self._series(data['verify_individual'], 1000)

        # aggregate verification is affine in log2(n)
        slope, intercept = np.polyfit(np.log2(n), agg, 1)

        fig, ax = plt.subplots(figsize=(10, 6))
        ax.plot(n, agg, 'o-', linewidth=2, color='#2E86AB', label='aggregate proof')
        ax.plot(n, single, 's-', linewidth=2, color='#C73E1D', label='n individual proofs')
        ax.plot(n, slope * np.log2(n) + intercept, ':', color='#2E86AB', alpha=0.7,
                label=f'fit {slope:.1f}·log2(n) + {intercept:.1f} ms')
        ax.set_xscale('log', base=2)
        ax.set_xlabel('Number of proofs (n)')
        ax.set_ylabel('Time (ms)')
        ax.set_title('Verification time')
        ax.grid(True, alpha=0.3)
        ax.legend()
        plt.tight_layout()
        plt.savefig('agg_verifier_time.png', dpi=200, bbox_inches='tight')
        plt.close()
        print("saved agg_verifier_time.png")

    def plot_proof_size(self):
        if not self.sizes:
            print("no proof size data")
            return
        n, size = self._series(self.sizes, 1 / 1024)

        fig, ax = plt.subplots(figsize=(10, 6))
        ax.bar([str(x) for x in n], size, color='#6A994E', alpha=0.8, edgecolor='black')
        ax.set_xlabel('Number of proofs (n)')
        ax.set_ylabel('Size (KiB)')
        ax.set_title('Aggregate proof size')
        ax.grid(True, alpha=0.3, axis='y')
        plt.tight_layout()
        plt.savefig('agg_proof_size.png', dpi=200, bbox_inches='tight')
        plt.close()
        print("saved agg_proof_size.png")

    def generate_all_plots(self):
        self.plot_aggregation()
        self.plot_verification()
        self.plot_proof_size()


if __name__ == '__main__':
    AggregationAnalyzer(*sys.argv[1:2]).generate_all_plots()
