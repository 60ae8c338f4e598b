def test_top_level_api_imports():
    import psyfit as p

    for name in [
        "StationaryPsychometric",
        "NonStationaryPsychometric",
        "ParameterBounds",
        "TrialData",
        "NegativeLogLikelihood",
        "NelderMeadFitter",
        "LBFGSBFitter",
        "ProjectedGradientFitter",
        "BADSFitter",
        "MultiStartFitter",
        "LaplaceApproximation",
        "VBMCInference",
        "information_criteria",
        "compare_models",
        "group_bms",
        "simulate_population",
        "run_model_recovery",
        "ConvergenceWarning",
    ]:
        assert hasattr(p, name)


def test_x64_enabled():
    import jax.numpy as jnp

    import psyfit  # noqa: F401

    assert jnp.zeros(1).dtype == jnp.float64


def test_registries():
    from psyfit.inference import FITTERS
    from psyfit.model import MODELS

    assert set(FITTERS) == {"nelder-mead", "l-bfgs-b", "optax", "bads"}
    assert set(MODELS) == {"stationary", "nonstationary"}
