"""
Visualization - debug figures of a trained model.

  1. Mean face
  2. Fisherfaces gallery (columns of W as images)
  3. Gallery projection scatter (first discriminant coordinates)
"""

import os
import numpy as np
import matplotlib
matplotlib.use('Agg')  # Non-interactive backend
import matplotlib.pyplot as plt

from fisherfaces.config import (
    FIGURES_DIR, FIGURE_DPI, IMAGE_WIDTH, IMAGE_HEIGHT, N_FISHERFACES_DISPLAY
)


def _save(fig, figures_dir, filename):
    os.makedirs(figures_dir, exist_ok=True)
    filepath = os.path.join(figures_dir, filename)
    fig.savefig(filepath, dpi=FIGURE_DPI, bbox_inches='tight')
    plt.close(fig)
    print(f"  [Saved] {filepath}")
    return filepath


def _to_unit(face):
    """Min-max scale for display."""
    return (face - face.min()) / (face.max() - face.min() + 1e-10)


# ==============================================================================
# 1. MEAN FACE
# ==============================================================================

def plot_mean_face(model, image_shape=(IMAGE_HEIGHT, IMAGE_WIDTH), title="Mean Face",
                   filename="mean_face.png", figures_dir=FIGURES_DIR):
    """Render μ as an image. Returns the saved path."""
    fig, ax = plt.subplots(1, 1, figsize=(4, 4))
    ax.imshow(_to_unit(model.mean.reshape(image_shape)), cmap='gray')
    ax.set_title(title, fontsize=14, fontweight='bold')
    ax.axis('off')
    return _save(fig, figures_dir, filename)


# ==============================================================================
# 2. FISHERFACES
# ==============================================================================

def plot_fisherfaces(model, image_shape=(IMAGE_HEIGHT, IMAGE_WIDTH),
                     n_show=N_FISHERFACES_DISPLAY, title="Fisherfaces",
                     filename="fisherfaces.png", figures_dir=FIGURES_DIR):
    """
    Render the first n_show columns of W, each reshaped to an image.
    Returns the saved path.
    """
    W = model.final_projection
    n_show = max(1, min(n_show, W.shape[1]))
    cols = min(4, n_show)
    rows = (n_show + cols - 1) // cols

    fig, axes = plt.subplots(rows, cols, figsize=(3 * cols, 3 * rows), squeeze=False)
    fig.suptitle(title, fontsize=16, fontweight='bold')

    for i in range(rows * cols):
        ax = axes[i // cols][i % cols]
        if i < n_show:
            ax.imshow(_to_unit(W[:, i].reshape(image_shape)), cmap='gray')
            ax.set_title(f"#{i + 1}", fontsize=10)
        ax.axis('off')

    fig.tight_layout()
    return _save(fig, figures_dir, filename)


# ==============================================================================
# 3. GALLERY PROJECTION
# ==============================================================================

def plot_gallery_projection(model, title="Gallery in discriminant space",
                            filename="gallery_projection.png", figures_dir=FIGURES_DIR):
    """
    Scatter the gallery on its first two coordinates (one coordinate ->
    strip plot), coloured by label. Returns the saved path.
    """
    Z = model.gallery_projections
    labels = np.asarray(model.gallery_labels)

    fig, ax = plt.subplots(1, 1, figsize=(8, 6))
    for label in model.classes:
        points = Z[labels == label]
        y = points[:, 1] if Z.shape[1] > 1 else np.zeros(len(points))
        ax.scatter(points[:, 0], y, label=str(label), s=40, alpha=0.8)

    ax.set_xlabel('Discriminant 1', fontsize=12)
    ax.set_ylabel('Discriminant 2' if Z.shape[1] > 1 else '', fontsize=12)
    ax.set_title(title, fontsize=14, fontweight='bold')
    ax.legend(loc='best', fontsize=8)
    ax.grid(True, alpha=0.3)
    return _save(fig, figures_dir, filename)
