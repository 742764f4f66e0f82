"""
AVL Tree Demo -- Rotation cases, tree shapes, height growth against the AVL
bounds, rotation counts, and a randomized insert/remove workload.

Generates:
- viz/*.png -- Individual visualization files
- report.pdf -- Comprehensive PDF report
"""

import logging
import sys
from pathlib import Path

import numpy as np
import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
from matplotlib.backends.backend_pdf import PdfPages

sys.path.insert(0, str(Path(__file__).resolve().parent / "src"))
from avl_tree import AVLTree

SEED = 42
np.random.seed(SEED)

VIZ_DIR = Path(__file__).parent / "viz"
VIZ_DIR.mkdir(exist_ok=True)

COLORS = {
    "blue": "#3498db",
    "red": "#e74c3c",
    "orange": "#f39c12",
    "green": "#27ae60",
    "purple": "#9b59b6",
    "dark": "#2c3e50",
}

GROWTH_SIZES = [2 ** k - 1 for k in range(1, 14)]
WORKLOAD_STEPS = 2000
WORKLOAD_RANGE = 400


class RotationCounter(logging.Handler):
    """Counts the rotation records the tree emits at DEBUG level."""

    def __init__(self):
        super().__init__(level=logging.DEBUG)
        self.count = 0

    def emit(self, record):
        if record.getMessage().startswith("rotate"):
            self.count += 1


def tree_layout(tree):
    """
    Node positions and edges for drawing a tree.

    x is the in-order rank, y the depth. Edges are recovered from the pre-order
    sequence, which determines a binary search tree uniquely.
    """
    rank = {v: i for i, v in enumerate(tree.in_order())}
    depth = {v: d for d, level in enumerate(tree.level_order()) for v in level}
    positions = {v: (rank[v], -depth[v]) for v in rank}

    edges = []
    stack = []
    for v in tree.pre_order():
        parent = None
        while stack and stack[-1] < v:
            parent = stack.pop()
        if parent is None and stack:
            parent = stack[-1]
        if parent is not None:
            edges.append((parent, v))
        stack.append(v)
    return positions, edges


def draw_tree(ax, tree, title, highlight=None):
    positions, edges = tree_layout(tree)
    for parent, child in edges:
        (x0, y0), (x1, y1) = positions[parent], positions[child]
        ax.plot([x0, x1], [y0, y1], color=COLORS["dark"], linewidth=1.2, zorder=1)
    for value, (x, y) in positions.items():
        color = COLORS["red"] if value == highlight else COLORS["blue"]
        ax.scatter(x, y, s=600, color=color, edgecolors=COLORS["dark"], zorder=2)
        ax.text(x, y, str(value), ha="center", va="center", color="white",
                fontsize=10, fontweight="bold", zorder=3)
    ax.set_title(title)
    ax.set_xlim(-1, max(len(positions), 1))
    ax.set_ylim(tree.height() * -1 - 0.7, 0.7)
    ax.axis("off")


def example_1_rotation_cases():
    """The four three-element imbalance cases and their single fix-up."""
    print("=" * 60)
    print("Example 1: Rotation Cases")
    print("=" * 60)

    cases = [
        ("Left-Left (single right)", [30, 20, 10]),
        ("Right-Right (single left)", [10, 20, 30]),
        ("Left-Right (double)", [30, 10, 20]),
        ("Right-Left (double)", [10, 30, 20]),
    ]

    fig, axes = plt.subplots(2, 4, figsize=(14, 6))
    for col, (name, order) in enumerate(cases):
        before = AVLTree.from_iterable(order[:2])
        after = AVLTree.from_iterable(order)
        print(f"{name:<28} insert {order} -> levels {after.level_order()}")
        draw_tree(axes[0, col], before, f"{name}\nbefore {order[2]}")
        draw_tree(axes[1, col], after, f"after {order[2]}", highlight=order[2])

    fig.tight_layout()
    fig.savefig(VIZ_DIR / "01_rotation_cases.png", dpi=150)
    plt.close(fig)

    return fig


def example_2_left_left_scenario():
    """Insert 15, 9, 20, 8, 11, 7: adding 7 rotates the root right."""
    print("\n" + "=" * 60)
    print("Example 2: Left-Left Rotation Below Two Levels")
    print("=" * 60)

    tree: AVLTree[int] = AVLTree()
    for v in [15, 9, 20, 8, 11]:
        tree.insert(v)
    before = tree.copy()

    tree.insert(7)
    print(f"Pre-order before 7:  {before.pre_order()}")
    print(f"Pre-order after 7:   {tree.pre_order()}")
    print(f"In-order:            {tree.in_order()}")
    print(f"Level-order:         {tree.level_order()}")
    print(f"Height: {before.height()} -> {tree.height()}, valid: {tree.is_valid()}")

    fig, axes = plt.subplots(1, 2, figsize=(12, 5))
    draw_tree(axes[0], before, "Before inserting 7")
    draw_tree(axes[1], tree, "After inserting 7", highlight=7)
    fig.tight_layout()
    fig.savefig(VIZ_DIR / "02_left_left_scenario.png", dpi=150)
    plt.close(fig)

    return fig, tree


def example_3_height_growth():
    """Sorted vs random insertion order against the AVL height bounds."""
    print("\n" + "=" * 60)
    print("Example 3: Height Growth")
    print("=" * 60)

    np.random.seed(SEED)
    sizes = np.array(GROWTH_SIZES)
    sorted_heights = []
    random_heights = []

    for n in sizes:
        sorted_heights.append(AVLTree.from_iterable(range(n)).height())
        values = np.random.permutation(n).tolist()
        random_heights.append(AVLTree.from_iterable(values).height())

    lower = np.ceil(np.log2(sizes + 1)) - 1
    upper = 1.44 * np.log2(sizes + 2)

    print(f"{'n':>6} {'sorted':>8} {'random':>8} {'lower':>8} {'upper':>8}")
    print("-" * 42)
    for n, hs, hr, lo, up in zip(sizes, sorted_heights, random_heights, lower, upper):
        print(f"{n:>6} {hs:>8} {hr:>8} {lo:>8.0f} {up:>8.2f}")

    fig, ax = plt.subplots(figsize=(10, 6))
    ax.plot(sizes, sorted_heights, "o-", color=COLORS["blue"], linewidth=2, label="Sorted insertion")
    ax.plot(sizes, random_heights, "s-", color=COLORS["orange"], linewidth=2, label="Random insertion")
    ax.plot(sizes, lower, "--", color=COLORS["green"], linewidth=2, label="Perfect tree (lower bound)")
    ax.plot(sizes, upper, "--", color=COLORS["red"], linewidth=2, label="1.44 log2(n + 2) (AVL bound)")
    ax.set_xscale("log", base=2)
    ax.set_xlabel("Number of elements n")
    ax.set_ylabel("Height (edges)")
    ax.set_title("AVL Height vs. Theoretical Bounds")
    ax.legend()
    ax.grid(True, alpha=0.3)
    fig.tight_layout()
    fig.savefig(VIZ_DIR / "03_height_growth.png", dpi=150)
    plt.close(fig)

    return fig, (sorted_heights, random_heights)


def example_4_rotation_counts():
    """Count rotations per insertion for sorted and random orders."""
    print("\n" + "=" * 60)
    print("Example 4: Rotations per Insertion")
    print("=" * 60)

    np.random.seed(SEED)
    tree_logger = logging.getLogger("avl_tree")
    previous_level = tree_logger.level
    tree_logger.setLevel(logging.DEBUG)

    sizes = np.array(GROWTH_SIZES[3:])
    per_insert = {"sorted": [], "random": []}
    try:
        for n in sizes:
            for order, values in [("sorted", list(range(n))),
                                  ("random", np.random.permutation(n).tolist())]:
                counter = RotationCounter()
                tree_logger.addHandler(counter)
                try:
                    AVLTree.from_iterable(values)
                finally:
                    tree_logger.removeHandler(counter)
                per_insert[order].append(counter.count / n)
    finally:
        tree_logger.setLevel(previous_level)

    for n, s, r in zip(sizes, per_insert["sorted"], per_insert["random"]):
        print(f"n = {n:>5}: sorted {s:.3f} rotations/insert, random {r:.3f}")

    fig, ax = plt.subplots(figsize=(10, 6))
    width = 0.35
    x_pos = np.arange(len(sizes))
    ax.bar(x_pos - width / 2, per_insert["sorted"], width, label="Sorted", color=COLORS["blue"])
    ax.bar(x_pos + width / 2, per_insert["random"], width, label="Random", color=COLORS["orange"])
    ax.set_xticks(x_pos)
    ax.set_xticklabels([str(n) for n in sizes], rotation=45)
    ax.set_xlabel("Number of elements n")
    ax.set_ylabel("Single rotations per insertion")
    ax.set_title("Rebalancing Cost (double rotations count twice)")
    ax.legend()
    ax.grid(True, alpha=0.3, axis="y")
    fig.tight_layout()
    fig.savefig(VIZ_DIR / "04_rotation_counts.png", dpi=150)
    plt.close(fig)

    return fig, per_insert


def example_5_mixed_workload():
    """Random inserts and removes, validating every invariant after each step."""
    print("\n" + "=" * 60)
    print("Example 5: Mixed Insert/Remove Workload")
    print("=" * 60)

    np.random.seed(SEED)
    tree: AVLTree[int] = AVLTree()
    reference = set()
    sizes = np.zeros(WORKLOAD_STEPS, dtype=int)
    heights = np.zeros(WORKLOAD_STEPS, dtype=int)
    insert_prob = np.where(np.arange(WORKLOAD_STEPS) < WORKLOAD_STEPS // 2, 0.75, 0.3)
    mismatches = 0

    for step in range(WORKLOAD_STEPS):
        value = int(np.random.randint(WORKLOAD_RANGE))
        if np.random.rand() < insert_prob[step]:
            added = tree.insert(value)
            mismatches += added == (value in reference)
            reference.add(value)
        else:
            removed = tree.remove(value)
            mismatches += removed != (value in reference)
            reference.discard(value)
        if not tree.is_valid():
            raise RuntimeError(f"invariant broken at step {step}")
        sizes[step] = tree.size()
        heights[step] = tree.height()

    print(f"Steps: {WORKLOAD_STEPS}, final size: {tree.size()}, final height: {tree.height()}")
    print(f"Peak size: {sizes.max()}, peak height: {heights.max()}")
    print(f"Return-value mismatches against set(): {mismatches}")
    print(f"In-order matches sorted(set): {tree.in_order() == sorted(reference)}")

    bound = 1.44 * np.log2(sizes + 2)

    fig, axes = plt.subplots(1, 2, figsize=(12, 5))
    axes[0].plot(sizes, color=COLORS["blue"], linewidth=1.5)
    axes[0].axvline(WORKLOAD_STEPS // 2, color=COLORS["dark"], linestyle=":", label="Insert-heavy -> remove-heavy")
    axes[0].set_xlabel("Step")
    axes[0].set_ylabel("Size")
    axes[0].set_title("Tree Size Over Time")
    axes[0].legend()
    axes[0].grid(True, alpha=0.3)

    axes[1].plot(heights, color=COLORS["purple"], linewidth=1.5, label="Height")
    axes[1].plot(bound, "--", color=COLORS["red"], linewidth=1.5, label="1.44 log2(size + 2)")
    axes[1].set_xlabel("Step")
    axes[1].set_ylabel("Height (edges)")
    axes[1].set_title("Height Stays Under the AVL Bound")
    axes[1].legend()
    axes[1].grid(True, alpha=0.3)

    fig.tight_layout()
    fig.savefig(VIZ_DIR / "05_mixed_workload.png", dpi=150)
    plt.close(fig)

    return fig, tree


def generate_pdf_report(figures_data):
    """Generate comprehensive PDF report."""
    print("\n" + "=" * 60)
    print("Generating PDF Report")
    print("=" * 60)

    pdf_path = VIZ_DIR.parent / "report.pdf"

    with PdfPages(pdf_path) as pdf:
        fig = plt.figure(figsize=(11, 8.5))
        fig.text(0.5, 0.6, "AVL Tree", fontsize=36, ha="center", fontweight="bold")
        fig.text(0.5, 0.5, "Height-Balanced Binary Search Tree", fontsize=24, ha="center")
        fig.text(0.5, 0.35, "Demonstration & Analysis Report", fontsize=18, ha="center", style="italic")
        fig.text(0.5, 0.2, f"Seed: {SEED}", fontsize=12, ha="center", color="gray")
        pdf.savefig(fig)
        plt.close(fig)

        fig = plt.figure(figsize=(11, 8.5))
        fig.text(0.5, 0.95, "Summary", fontsize=24, ha="center", fontweight="bold")

        summary_text = """
This report exercises a recursive AVL tree implementation:

• Insert and remove descend recursively and rebalance every node
  on the way back up
• Four rotation cases: single right, single left, left-right
  and right-left
• Two-child removal copies the in-order successor into the node

• Checked properties:
  - BST order, stored heights and balance after every mutation
  - Height against log2(n + 1) - 1 and 1.44 log2(n + 2)
  - Insert/remove results against Python's built-in set

Key Findings:
  1. Sorted insertion builds a perfect tree when n = 2^k - 1
  2. Random insertion stays close to the perfect-tree height
  3. Sorted insertion rotates far more often than random insertion
"""
        fig.text(0.1, 0.85, summary_text, fontsize=12, ha="left", va="top",
                 fontfamily="monospace", linespacing=1.5)
        pdf.savefig(fig)
        plt.close(fig)

        for title, image_name in figures_data:
            page = plt.figure(figsize=(11, 8.5))
            page.text(0.5, 0.98, title, fontsize=14, ha="center", fontweight="bold")
            ax = page.add_axes([0.05, 0.05, 0.9, 0.88])
            ax.imshow(plt.imread(VIZ_DIR / image_name))
            ax.axis("off")
            pdf.savefig(page)
            plt.close(page)

    print(f"PDF report saved to: {pdf_path}")
    return pdf_path


def main():
    print("\n" + "#" * 60)
    print("#" + " " * 23 + "AVL TREE DEMO" + " " * 22 + "#")
    print("#" * 60)
    print(f"\nRandom seed: {SEED}")
    print(f"Output directory: {VIZ_DIR}")

    figures = []

    example_1_rotation_cases()
    figures.append(("Example 1: Rotation Cases", "01_rotation_cases.png"))

    example_2_left_left_scenario()
    figures.append(("Example 2: Left-Left Scenario", "02_left_left_scenario.png"))

    example_3_height_growth()
    figures.append(("Example 3: Height Growth", "03_height_growth.png"))

    example_4_rotation_counts()
    figures.append(("Example 4: Rotation Counts", "04_rotation_counts.png"))

    example_5_mixed_workload()
    figures.append(("Example 5: Mixed Workload", "05_mixed_workload.png"))

    generate_pdf_report(figures)

    print("\n" + "=" * 60)
    print("DEMO COMPLETE")
    print("=" * 60)
    print(f"\nGenerated files:")
    for f in sorted(VIZ_DIR.glob("*.png")):
        print(f"  - {f.relative_to(VIZ_DIR.parent)}")
    print(f"  - report.pdf")


if __name__ == "__main__":
    main()
