"""
Profiling script for incremental-layout performance analysis.

This script profiles the spectral layout on random graphs of several sizes,
both from scratch and after small mutations, to show how much work the
incremental path saves.
"""

import cProfile
import io
import pstats
import sys
import time
from pathlib import Path
from pstats import SortKey

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

import numpy as np


def create_edges(n_nodes, n_edges, seed=42):
    """Create approximately n_edges random arcs over n_nodes vertices."""
    rng = np.random.default_rng(seed)
    edges = []
    for _ in range(n_edges):
        source, target = (int(v) for v in rng.integers(0, n_nodes, size=2))
        if source != target:
            edges.append((source, target))
    return edges


def create_layout(n_nodes, n_edges, dimension=2, seed=42):
    from incremental_layout import SpectralLayout

    edges = create_edges(n_nodes, n_edges, seed)
    half = len(edges) // 2
    return SpectralLayout.from_edges(
        {"strong": edges[:half], "weak": edges[half:]},
        subgraph_weights={"strong": 1.0, "weak": 0.25},
        vertex_count=n_nodes,
        dimension=dimension,
        random_seed=seed,
        iterations=50_000,
    )


def converge(layout):
    """Advance until converged; return the number of steps taken."""
    steps = 0
    while layout.advance() is not None:
        steps += 1
        if steps >= layout.iterations:
            break
    return steps


# =============================================================================
# Scenarios
# =============================================================================

def profile_small():
    """Spectral: small graph (20 nodes, 30 edges)."""
    return converge(create_layout(20, 30))


def profile_medium():
    """Spectral: medium graph (100 nodes, 200 edges)."""
    return converge(create_layout(100, 200))


def profile_large():
    """Spectral: large graph (500 nodes, 1000 edges), three axes."""
    return converge(create_layout(500, 1000, dimension=3))


def profile_reconverge():
    """Spectral: re-converge after adding and removing vertices (100 nodes)."""
    layout = create_layout(100, 200)
    converge(layout)

    rng = np.random.default_rng(7)
    steps = 0
    for _ in range(10):
        vertex = layout.add_vertex()
        layout.attach(vertex, int(rng.integers(vertex)), "strong")
        steps += converge(layout)
        layout.remove_vertex(int(rng.integers(layout.vertex_count)))
        steps += converge(layout)
    return steps


# =============================================================================
# Benchmarking Infrastructure
# =============================================================================

def benchmark_scenario(name, func, profile=True):
    """Benchmark a scenario and print timing."""
    print(f"\n{'-'*60}")
    print(f"  {name}")
    print('-'*60)

    profiler = cProfile.Profile() if profile else None
    start_time = time.time()
    if profiler:
        profiler.enable()
    steps = func()
    if profiler:
        profiler.disable()
    elapsed = time.time() - start_time

    print(f"Time: {elapsed:.3f}s ({steps} steps)")
    if profiler:
        s = io.StringIO()
        ps = pstats.Stats(profiler, stream=s).sort_stats(SortKey.CUMULATIVE)
        ps.print_stats(10)
        print("\nTop 10 functions:")
        for line in s.getvalue().split('\n')[5:16]:
            if line.strip():
                print(line)

    return elapsed, steps


def main():
    """Run all profiling scenarios."""
    print("=" * 60)
    print("  incremental-layout Performance Profiling")
    print("=" * 60)

    scenarios = [
        ("Spectral: Small (20 nodes)", profile_small),
        ("Spectral: Medium (100 nodes)", profile_medium),
        ("Spectral: Large (500 nodes, 3D)", profile_large),
        ("Spectral: Re-converge (100 nodes)", profile_reconverge),
    ]

    profile = "--profile" in sys.argv
    results = {}
    for name, func in scenarios:
        results[name] = benchmark_scenario(name, func, profile=profile)

    # Print summary table
    print("\n" + "=" * 60)
    print("  Summary")
    print("=" * 60)
    print(f"\n{'Scenario':<38} {'Time':>10} {'Steps':>8}")
    print("-" * 58)
    for name, (elapsed, steps) in results.items():
        print(f"{name:<38} {elapsed:>10.3f}s {steps:>8}")


if __name__ == "__main__":
    main()
