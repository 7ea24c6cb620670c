from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware

from mathengine import (
    Language, UnsupportedLanguage, are_equivalent, canonicalize, evaluate,
    is_within_tolerance, reduce_to_polynomial, render_english_strict, render_latex,
)
from mathengine.logging_utils import setup_logging
from mathengine.settings import get_settings

from backend.app.schemas import (
    EquivalenceRequest, ExpressionRequest, RenderRequest, ToleranceRequest,
    canonical_to_json, polynomial_to_json, real_to_json, to_equation, to_expression,
)

setup_logging(get_settings()["log_level"])

app = FastAPI(title="mathengine API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _run(func):
    try:
        return func()
    except HTTPException:
        raise
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Engine error: {str(e)}")


def _render_target(req: RenderRequest):
    if (req.expression is None) == (req.equation is None):
        raise HTTPException(status_code=400,
                            detail="Provide exactly one of 'expression' or 'equation'.")
    if req.equation is not None:
        return to_equation(req.equation)
    return to_expression(req.expression)


def _divide_as_fraction(req: RenderRequest) -> bool:
    if req.divide_as_fraction is not None:
        return req.divide_as_fraction
    return bool(get_settings()["divide_as_fraction"])


@app.post("/api/evaluate")
def evaluate_expression(req: ExpressionRequest):
    value = _run(lambda: evaluate(to_expression(req.expression)))
    return {"value": real_to_json(value)}


@app.post("/api/polynomial")
def reduce_expression(req: ExpressionRequest):
    polynomial = _run(lambda: reduce_to_polynomial(to_expression(req.expression)))
    return {"polynomial": polynomial_to_json(polynomial)}


@app.post("/api/canonical")
def canonical_form(req: ExpressionRequest):
    canonical = _run(lambda: canonicalize(to_expression(req.expression)))
    return {"canonical": canonical_to_json(canonical)}


@app.post("/api/equivalent")
def check_equivalence(req: EquivalenceRequest):
    equivalent = _run(lambda: are_equivalent(to_expression(req.first),
                                             to_expression(req.second)))
    return {"equivalent": equivalent}


@app.post("/api/tolerance")
def check_tolerance(req: ToleranceRequest):
    tolerance = req.tolerance if req.tolerance is not None else get_settings()["tolerance"]
    value = _run(lambda: evaluate(to_expression(req.value)))
    expected = _run(lambda: evaluate(to_expression(req.expected)))
    within = _run(lambda: is_within_tolerance(value, expected, tolerance))
    return {"within_tolerance": within, "value": real_to_json(value)}


@app.post("/api/render/latex")
def latex(req: RenderRequest):
    target = _run(lambda: _render_target(req))
    return {"latex": _run(lambda: render_latex(target, _divide_as_fraction(req)))}


@app.post("/api/render/english")
def english(req: RenderRequest):
    target = _run(lambda: _render_target(req))
    language_name = (req.language or get_settings()["language"]).upper()
    language = Language.__members__.get(language_name, Language.LANGUAGE_UNSPECIFIED)
    try:
        text = render_english_strict(target, language, _divide_as_fraction(req))
    except UnsupportedLanguage:
        return {"text": None, "supported": False}
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"text": text, "supported": True}
