import logging
import math
import torch
from dualdiff import derivative, babylonian_sqrt, solve_ode, newton, log, sin


def demo_babylonian():
    print("=== Differentiating Through an Algorithm ===")

    # 1. Heron's square root knows nothing about derivatives
    x = 5.0
    slope = derivative(babylonian_sqrt, x)
    exact = 1 / (2 * math.sqrt(x))
    print(f"[1] d/dx babylonian_sqrt(x) at x={x}")
    print(f"    Dual:   {slope:.16f}")
    print(f"    Exact:  {exact:.16f}")
    print(f"    Error:  {abs(slope - exact):.2e}")

    # 2. Same routine, a whole batch of points at once
    xs = torch.linspace(1.0, 4.0, 4, dtype=torch.float64)
    print(f"\n[2] Batched derivative at {xs.tolist()}")
    print(f"    {derivative(babylonian_sqrt, xs).tolist()}")

    # 3. Chain rule through composition
    a = 3.1
    f = lambda x: log(x * x + sin(x))
    print(f"\n[3] d/dx log(x^2 + sin x) at x={a}: {derivative(f, a):.16f}")

    # 4. Sensitivity of an ODE solution to its decay rate
    decay = lambda u, p, t: -p * u
    s = derivative(lambda p: solve_ode(decay, 1.0, (0.0, 1.0), p=p)[1][-1], 0.5)
    print(f"\n[4] du(1)/dp for u' = -p u, p=0.5: {s:.10f} (exact {-math.exp(-0.5):.10f})")

    # 5. Newton's method driven by forward-mode derivatives
    root = newton(lambda x: x * x * x - 2 * x - 5, 2.0)
    print(f"\n[5] Root of x^3 - 2x - 5: {root:.15f}")

    if abs(slope - exact) < 1e-9:
        print("\nSUCCESS: Derivative of the iteration matches the closed form.")
    else:
        print("\nFAILURE: Derivative of the iteration is off.")


if __name__ == "__main__":
    logging.basicConfig(level=logging.DEBUG, format="%(name)s %(levelname)s: %(message)s")
    demo_babylonian()
