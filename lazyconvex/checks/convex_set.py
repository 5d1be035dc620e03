import numpy as np


class ConvexSetChecks:
    """
    A mixin class providing a self-checking mechanism for convex sets.

    When inherited by a ConvexSet subclass, it provides the `.check()` method
    to run a suite of randomized tests of the evaluation protocol, ensuring
    that support vectors, support functions and membership agree.
    """

    def _check_support_consistency(self, d):
        """Checks that the support vector attains the support function."""
        rho = self.support_function(d)
        if not np.isfinite(rho):
            return
        v = self.support_vector(d)
        if not np.isclose(float(np.dot(d, v)), float(rho), rtol=1e-6, atol=1e-6):
            raise AssertionError("Protocol failed: d . sigma(d) != rho(d)")

    def _check_support_membership(self, d):
        """Checks that the support vector belongs to the set."""
        if not np.isfinite(self.support_function(d)):
            return
        v = self.support_vector(d)
        if not self.is_element(v):
            raise AssertionError("Protocol failed: sigma(d) is not an element of the set")

    def _check_positive_homogeneity(self, d, a):
        """Checks that rho(a d) == a rho(d) for a > 0."""
        lhs = self.support_function(a * d)
        rhs = a * self.support_function(d)
        if np.isinf(lhs) or np.isinf(rhs):
            if lhs != rhs:
                raise AssertionError("Protocol failed: rho is not positively homogeneous")
            return
        if not np.isclose(float(lhs), float(rhs), rtol=1e-6, atol=1e-6):
            raise AssertionError("Protocol failed: rho is not positively homogeneous")

    def check(self, n_checks: int = 10, rng=None) -> None:
        """
        Runs a suite of randomized checks of the support-function protocol.

        Args:
            n_checks: The number of randomized trials to run.
            rng: Optional `numpy.random.Generator` for reproducibility.

        Raises:
            AssertionError: If any of the underlying checks fail.
        """
        rng = np.random.default_rng(rng)
        print(
            f"\nRunning {n_checks} randomized protocol checks for {self.__class__.__name__}..."
        )
        if self.is_empty():
            print("Set is empty; nothing to check.")
            return
        for _ in range(n_checks):
            d = rng.standard_normal(self.dim)
            a = rng.uniform(0.1, 10.0)

            self._check_support_consistency(d)
            self._check_support_membership(d)
            self._check_positive_homogeneity(d, a)

        print(f"All {n_checks} protocol checks passed successfully.")
