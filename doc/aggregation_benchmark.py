"""
Aggregation Benchmark
=====================

Measures, for growing batch sizes n:
- SRS generation and specialization time
- aggregation time
- aggregate verification time vs. verifying the n proofs one by one
- aggregate proof size
- peak memory of one aggregation

Usage:
    python doc/aggregation_benchmark.py
"""

import json
import os
import time
import tracemalloc
from typing import List, Tuple

import numpy as np

from snarkpack import setup, setup_fake_srs
from snarkpack.groth16 import prove_with_trapdoor, setup_toy_circuit, verify_proof
from snarkpack.prover import aggregate_proofs
from snarkpack.serialization import aggregate_proof_to_bytes
from snarkpack.verifier import verify_aggregate_proof


class AggregationBenchmark:

    def __init__(self, curve='BN254', num_inputs=2):
        print(f"Initializing benchmark (curve: {curve})...")
        self.params = setup(curve)
        self.group = self.params['group']
        self.vk, self.trapdoor = setup_toy_circuit(self.group, num_inputs)
        self.num_inputs = num_inputs
        self.results = {}
        self.memory_results = {}
        self.size_results = {}

    def measure_time(self, func, *args, num_runs=5, **kwargs) -> Tuple[float, float, object]:
        """
        Mean and standard deviation of the run time of ``func`` in seconds.

        Returns
        -------
        tuple
            (mean, std, result of the last run)
        """
        times = []
        result = None
        for _ in range(num_runs):
            start = time.perf_counter()
            result = func(*args, **kwargs)
            times.append(time.perf_counter() - start)
        return float(np.mean(times)), float(np.std(times)), result

    def measure_memory(self, func, *args, **kwargs) -> Tuple[float, object]:
        """Peak traced memory of one call in MB."""
        tracemalloc.start()
        result = func(*args, **kwargs)
        _, peak = tracemalloc.get_traced_memory()
        tracemalloc.stop()
        return peak / 1024 / 1024, result

    def make_batch(self, n: int):
        public_inputs = [[i + j + 1 for j in range(self.num_inputs)] for i in range(n)]
        proofs = [prove_with_trapdoor(self.trapdoor, x, self.group) for x in public_inputs]
        return proofs, public_inputs

    def _verify_individually(self, proofs, public_inputs):
        return all(verify_proof(self.vk, p, x, self.group) for p, x in zip(proofs, public_inputs))

    def benchmark_srs(self, sizes: List[int], num_runs=3):
        print(f"\nSRS generation ({num_runs} runs each)")
        print("=" * 60)
        results, std_devs = {}, {}
        for n in sizes:
            print(f"  n={n}...", end=" ", flush=True)
            avg, std, _ = self.measure_time(setup_fake_srs, self.group, n, num_runs=num_runs)
            results[n], std_devs[n] = avg, std
            print(f"{avg * 1000:.2f} ± {std * 1000:.2f} ms")
        self.results['srs_generation'] = results
        self.results['srs_generation_std'] = std_devs
        return results

    def benchmark_aggregation(self, sizes: List[int], num_runs=5):
        print(f"\nAggregation and verification ({num_runs} runs each)")
        print("=" * 60)
        keys = ('aggregate', 'verify_aggregate', 'verify_individual')
        results = {k: {} for k in keys}
        std_devs = {k: {} for k in keys}

        for n in sizes:
            print(f"  n={n}...", end=" ", flush=True)
            prover_srs, vk_srs = setup_fake_srs(self.group, n).specialize(n)
            proofs, public_inputs = self.make_batch(n)

            t1, s1, proof = self.measure_time(aggregate_proofs, prover_srs, proofs, b"bench", num_runs=num_runs)
            t2, s2, ok = self.measure_time(verify_aggregate_proof, vk_srs, self.vk, public_inputs, proof,
                                           b"bench", num_runs=num_runs)
            if not ok:
                raise RuntimeError(f"aggregate proof of {n} proofs did not verify")
            t3, s3, _ = self.measure_time(self._verify_individually, proofs, public_inputs, num_runs=num_runs)

            for key, t, s in zip(keys, (t1, t2, t3), (s1, s2, s3)):
                results[key][n] = t
                std_devs[key][n] = s

            self.size_results[n] = len(aggregate_proof_to_bytes(proof, self.group))
            print(f"agg:{t1 * 1000:.1f}ms verify:{t2 * 1000:.1f}ms "
                  f"individual:{t3 * 1000:.1f}ms size:{self.size_results[n]}B")

        self.results['aggregation'] = results
        self.results['aggregation_std'] = std_devs
        return results

    def benchmark_memory(self, sizes: List[int]):
        print("\nAggregation memory")
        print("=" * 60)
        for n in sizes:
            prover_srs, _ = setup_fake_srs(self.group, n).specialize(n)
            proofs, _ = self.make_batch(n)
            mem, _ = self.measure_memory(aggregate_proofs, prover_srs, proofs)
            self.memory_results[n] = mem
            print(f"  n={n}: {mem:.2f} MB")
        return self.memory_results

    def run_all_benchmarks(self, sizes: List[int] = None, num_runs: int = 5):
        if sizes is None:
            sizes = [2, 4, 8, 16, 32]
        self.benchmark_srs(sizes, num_runs)
        self.benchmark_aggregation(sizes, num_runs)
        self.benchmark_memory(sizes)

    def save_results(self, filename='aggregation_results.json'):
        os.makedirs(os.path.dirname(filename) or '.', exist_ok=True)
        data = {
            'timing': self.results,
            'memory': self.memory_results,
            'proof_size': self.size_results,
        }
        with open(filename, 'w') as f:
            json.dump(data, f, indent=2)
        print(f"\nResults saved to {filename}")


if __name__ == '__main__':
    benchmark = AggregationBenchmark('BN254')
    benchmark.run_all_benchmarks([2, 4, 8, 16, 32], num_runs=3)
    benchmark.save_results('aggregation_results.json')
