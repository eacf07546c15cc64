from fastapi import FastAPI, UploadFile, File, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from . import transforms
from .errors import InvalidTableError, MissingColumnsError
from .logging_setup import configure_logging, get_logger
from .models import (
    DualTableRequest,
    ErrorResponse,
    HealthResponse,
    MissingColumnsResponse,
    Table,
    TransformResponse,
)
from .normalize import read_table

configure_logging()
logger = get_logger("parseos.main")

app = FastAPI(
    title="parseos",
    description="Tabular tax records to AGIP / AFIP fixed-format filing files",
    version="0.1.0",
)

_ERROR_RESPONSES = {
    400: {"model": MissingColumnsResponse},
    500: {"model": ErrorResponse},
}


@app.exception_handler(RequestValidationError)
async def invalid_body(request: Request, exc: RequestValidationError):
    return JSONResponse(status_code=400, content={"error": "Missing or invalid headers/rows"})


@app.exception_handler(InvalidTableError)
async def invalid_table(request: Request, exc: InvalidTableError):
    return JSONResponse(status_code=400, content={"error": str(exc)})


@app.exception_handler(MissingColumnsError)
async def missing_columns(request: Request, exc: MissingColumnsError):
    body = MissingColumnsResponse(error=exc.message, missingColumns=exc.missing, hint=exc.hint)
    return JSONResponse(status_code=400, content=body.model_dump())


@app.exception_handler(Exception)
async def unexpected(request: Request, exc: Exception):
    logger.exception("unhandled error on %s", request.url.path)
    return JSONResponse(status_code=500, content={"error": "Error processing request"})


@app.get("/health", response_model=HealthResponse)
def health():
    return {"ok": True}


@app.post("/parseos/arciba", response_model=TransformResponse, responses=_ERROR_RESPONSES)
def parseo_arciba(body: Table):
    return {"result": transforms.arciba(body.headers, body.rows)}


@app.post(
    "/parseos/arciba/drogueria-vip",
    response_model=TransformResponse,
    responses=_ERROR_RESPONSES,
)
def parseo_arciba_dual(body: DualTableRequest):
    result = transforms.arciba_dual(
        (body.retenciones.headers, body.retenciones.rows),
        (body.percepciones.headers, body.percepciones.rows),
    )
    return {"result": result}


@app.post("/parseos/sicore-ganancias", response_model=TransformResponse, responses=_ERROR_RESPONSES)
def parseo_sicore(body: Table):
    return {"result": transforms.sicore(body.headers, body.rows)}


@app.post("/parseos/iva", response_model=TransformResponse, responses=_ERROR_RESPONSES)
def parseo_iva(body: Table):
    return {"result": transforms.iva(body.headers, body.rows)}


@app.post(
    "/parseos/iva/cuadro-compras",
    response_model=TransformResponse,
    responses=_ERROR_RESPONSES,
)
def parseo_iva_cuadro(body: Table):
    return {"result": transforms.iva_cuadro_compras(body.headers, body.rows)}


@app.post("/parseos/suss", response_model=TransformResponse, responses=_ERROR_RESPONSES)
def parseo_suss(body: Table):
    return {"result": transforms.suss(body.headers, body.rows)}


@app.post("/parseos/{fmt}/upload", response_model=TransformResponse, responses=_ERROR_RESPONSES)
async def parseo_upload(fmt: str, file: UploadFile = File(...)):
    transform = transforms.CSV_TRANSFORMS.get(fmt)
    if transform is None:
        raise HTTPException(status_code=404, detail=f"Unknown format: {fmt}")
    if not (file.filename or "").lower().endswith(".csv"):
        raise HTTPException(status_code=422, detail="Only CSV files are supported")

    raw = await file.read()
    headers, rows = read_table(raw)
    return {"result": transform(headers, rows)}
