from dataclasses import asdict

from fastapi import APIRouter, Depends, Query
from starlette.concurrency import run_in_threadpool

from formflow.api.auth import require_api_key
from formflow.api.schemas import FormCreateRequest, FormCreatedResponse, FormUpdateRequest
from formflow.store.form_repo import create_form, list_forms_by_creator, load_form, update_form

router = APIRouter(prefix="/api/forms", tags=["forms"])


@router.post("", response_model=FormCreatedResponse, dependencies=[Depends(require_api_key)])
async def create(req: FormCreateRequest):
    record = await run_in_threadpool(
        create_form,
        req.title,
        req.schema_,
        req.description,
        req.creatorAddress,
    )
    return {"id": record.id}


@router.get("")
async def find_all_by_creator(creator: str = Query(...)):
    records = await run_in_threadpool(list_forms_by_creator, creator)
    return [asdict(r) for r in records]


@router.get("/{form_id}")
async def find_one(form_id: str):
    record = await run_in_threadpool(load_form, form_id)
    return asdict(record)


@router.put("/{form_id}", dependencies=[Depends(require_api_key)])
async def update(form_id: str, req: FormUpdateRequest):
    changes = req.model_dump(by_alias=True, exclude_none=True)
    record = await run_in_threadpool(update_form, form_id, changes)
    return asdict(record)
