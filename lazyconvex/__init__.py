from lazyconvex.exceptions import (
    LazyConvexError,
    DimensionMismatchError,
    EmptySetError,
    UnboundedDirectionError,
    BoundednessError,
    UnknownAlgorithmError,
    LPSolverError,
    BackendUnavailableError,
)

from lazyconvex.tolerance import (
    Tolerance,
    get_tolerance,
    set_tolerance,
    reset_tolerance,
    tolerance_context,
    isapproxzero,
    isapprox_vector,
)

from lazyconvex.convex_set import ConvexSet, sigma, rho, dim

from lazyconvex.sets import (
    AbstractPolyhedron,
    AbstractPolytope,
    AbstractZonotope,
    AbstractHyperrectangle,
    AbstractSingleton,
    EmptySet,
    Universe,
    Singleton,
    ZeroSet,
    Hyperrectangle,
    BallInf,
    Interval,
    Ball1,
    Ball2,
    Zonotope,
    LineSegment,
    HalfSpace,
    Hyperplane,
    HPolyhedron,
    HPolytope,
    VPolytope,
    VPolygon,
)

from lazyconvex.operations import (
    LazyOperation,
    MinkowskiSum,
    MinkowskiSumArray,
    CachedMinkowskiSumArray,
    Intersection,
    IntersectionArray,
    IntersectionCache,
    UnionSet,
    UnionSetArray,
    LinearMap,
    SparseMatrixExp,
    ExponentialMap,
    ProjectionSparseMatrixExp,
    ExponentialProjectionMap,
    CartesianProduct,
    CartesianProductArray,
)

from lazyconvex.convex_hull import (
    convex_hull,
    convex_hull_inplace,
    convex_hull_sets,
    convex_hull_union,
    monotone_chain,
)

from lazyconvex.backends import (
    LPStatus,
    LPResult,
    solve_lp,
    PolyhedralBackend,
    ScipyPolyhedralBackend,
    UnavailablePolyhedralBackend,
    get_polyhedral_backend,
    set_polyhedral_backend,
)

from lazyconvex.dispatch import PairDispatcher

from lazyconvex.isdisjoint import isdisjoint, registered_rules

from lazyconvex import concrete

from lazyconvex.io import read_gen
