"""
Example script demonstrating basic usage of the ihtcore package.

This script shows how to:
1. Generate a sparse regression model
2. Create a design matrix and noisy responses
3. Compute an IHT path over model sizes and pick a size on held-out data
4. Compare the selected model with the true coefficients

Usage:
    python basic_example.py
"""

import numpy as np
import matplotlib.pyplot as plt

from ihtcore import IHTConfig, evaluate_path, path_to_sparse, select_model, solve_path


def main():
    """Run the example."""
    p = 100  # number of predictors
    k = 8    # true model size

    print("Generating a sparse model with", p, "predictors and", k, "non-zeros")

    # Set random seed for reproducibility
    np.random.seed(42)

    # Create sparse coefficients with k non-zeros
    b_true = np.zeros(p)
    non_zero_indices = np.random.choice(p, k, replace=False)
    b_true[non_zero_indices] = np.random.choice([-1.0, 1.0], k) * np.random.uniform(1.0, 3.0, k)

    # Training and held-out data from the same model
    n = 3 * p
    x_train = np.random.normal(0, 1/np.sqrt(n), (n, p))
    x_test = np.random.normal(0, 1/np.sqrt(n), (n, p))
    y_train = x_train @ b_true + 0.05 * np.random.randn(n)
    y_test = x_test @ b_true + 0.05 * np.random.randn(n)

    print(f"Created {n} training and {n} held-out samples")

    # Fit one model per size, warm starting along the path
    path = list(range(1, 2 * k + 1))
    config = IHTConfig(tol=1e-6, max_iter=500)
    print(f"Computing IHT path over model sizes {path[0]}..{path[-1]}...")
    records = solve_path(x_train, y_train, path, config)

    train_losses = np.array([r.loss for r in records])
    test_losses = evaluate_path(records, x_test, y_test)
    best = select_model(records, x_test, y_test)
    b_best = records[best].beta

    error = np.linalg.norm(b_best - b_true) / np.linalg.norm(b_true)
    betas = path_to_sparse(records)

    print("\nResults:")
    print(f"True model size: {k}")
    print(f"Selected model size: {path[best]}")
    print(f"Relative error: {error:.4f}")
    print(f"Total iterations along path: {sum(r.iter for r in records)}")
    print(f"Nonzeros stored in path table: {betas.nnz}")

    # Plot results
    plt.figure(figsize=(10, 8))

    plt.subplot(3, 1, 1)
    plt.plot(path, train_losses, 'bo-', label='training')
    plt.plot(path, test_losses, 'ro-', label='held-out')
    plt.axvline(path[best], color='g', linestyle='--')
    plt.title('Loss along the IHT path')
    plt.xlabel('Model size')
    plt.legend()
    plt.grid(True)

    plt.subplot(3, 1, 2)
    plt.stem(b_true, markerfmt='bo', linefmt='b-', basefmt='b-')
    plt.title('True Coefficients')
    plt.grid(True)

    plt.subplot(3, 1, 3)
    plt.stem(b_best, markerfmt='ro', linefmt='r-', basefmt='r-')
    plt.title(f'Selected Model, size {path[best]} (Error: {error:.4f})')
    plt.grid(True)

    plt.tight_layout()
    plt.show()


if __name__ == "__main__":
    main()
