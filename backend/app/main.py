from typing import Optional

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from matrix_tutor.errors import LinAlgError
from matrix_tutor.walkthrough import (
    explain_cramer, explain_determinant, explain_elimination, explain_gauss_jordan,
)

app = FastAPI(title="MatrixTutor API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


class DeterminantRequest(BaseModel):
    matrix: list[list[int]]
    method: Optional[str] = None
    line: Optional[str] = None
    index: Optional[int] = None


class SystemRequest(BaseModel):
    coefficients: list[list[int]]
    constants: list[int]
    variables: Optional[list[str]] = None


class EliminationRequest(BaseModel):
    augmented: list[list[int]]
    variables: Optional[list[str]] = None
    reduced: bool = False


class StepInfo(BaseModel):
    description: str
    expression: str
    explanation: str


class WalkthroughResponse(BaseModel):
    equation: str
    steps: list[StepInfo]
    final_answer: str
    verification_steps: list[StepInfo]
    solution: Optional[list[Optional[str]]] = None
    determinant: Optional[str] = None
    singular: bool = False


def _run(fn, *args, **kwargs) -> dict:
    try:
        return fn(*args, **kwargs)
    except LinAlgError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Solver error: {str(e)}")


@app.post("/api/determinant", response_model=WalkthroughResponse)
def determinant(req: DeterminantRequest):
    return _run(explain_determinant, req.matrix, method=req.method,
                line=req.line, index=req.index)


@app.post("/api/cramer", response_model=WalkthroughResponse)
def cramer(req: SystemRequest):
    return _run(explain_cramer, req.coefficients, req.constants, req.variables)


@app.post("/api/inverse", response_model=WalkthroughResponse)
def inverse(req: SystemRequest):
    return _run(explain_gauss_jordan, req.coefficients, req.constants, req.variables)


@app.post("/api/elimination", response_model=WalkthroughResponse)
def elimination(req: EliminationRequest):
    return _run(explain_elimination, req.augmented, req.variables, reduced=req.reduced)
