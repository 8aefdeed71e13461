import asyncio

import pytest

from app.constants.statuses import AssetSource
from app.core import AppError, TransferError, ValidationError
from app.services.asset_store import AssetReferenceStore, NoAsset, PendingAsset, ReferencedAsset
from app.uploads.types import IDLE_PROGRESS, UploadProgress
from conftest import MB, PUBLIC_BASE, ScriptedBlobStore, make_file


@pytest.mark.asyncio
async def test_selection_supersedes_persisted_reference(blob):
    store = AssetReferenceStore(blob)
    store.load("https://x/y.jpg")
    assert store.reference == "https://x/y.jpg"

    result = await store.select_file(make_file(2 * MB, "image/png", "p.png"))

    assert result.valid
    assert store.reference == ""
    assert isinstance(store.asset, PendingAsset)
    assert store.asset.superseded == ReferencedAsset("https://x/y.jpg", AssetSource.PERSISTED)
    assert store.manual_reference_editable is False
    assert blob.deleted == []


@pytest.mark.asyncio
async def test_preview_is_a_local_data_uri(blob):
    store = AssetReferenceStore(blob)
    await store.select_file(make_file(2048, "image/png", "p.png"))

    preview = await store.preview_ready()

    assert preview.startswith("data:image/png;base64,")
    assert blob.uploads == []


@pytest.mark.asyncio
async def test_preview_failure_does_not_block_selection_or_upload(blob, monkeypatch):
    def broken(file):
        raise RuntimeError("decoder unavailable")

    monkeypatch.setattr("app.services.preview.encode_data_uri", broken)
    store = AssetReferenceStore(blob)

    result = await store.select_file(make_file(2 * MB, "image/png", "p.png"))

    assert result.valid
    assert await store.preview_ready() is None
    assert isinstance(store.asset, PendingAsset)

    reference = await store.upload("news")

    assert reference == PUBLIC_BASE + blob.uploads[0]["path"]
    assert store.reference == reference


@pytest.mark.asyncio
async def test_invalid_selection_keeps_current_asset(blob):
    store = AssetReferenceStore(blob)
    store.load("https://x/y.jpg")

    result = await store.select_file(make_file(2 * MB, "application/pdf", "cv.pdf"))

    assert not result.valid
    assert store.reference == "https://x/y.jpg"
    assert store.progress == UploadProgress(0, False, "not an image type")


@pytest.mark.asyncio
async def test_manual_reference_is_refused_while_file_pending(blob):
    store = AssetReferenceStore(blob)
    await store.select_file(make_file(2 * MB))

    with pytest.raises(ValidationError):
        store.set_manual_reference("https://x/other.jpg")

    assert store.pending_file is not None


def test_manual_reference_accepted_without_pending_file(blob):
    store = AssetReferenceStore(blob)
    store.set_manual_reference("  https://x/manual.jpg ")
    assert store.asset == ReferencedAsset("https://x/manual.jpg", AssetSource.MANUAL)

    store.set_manual_reference("   ")
    assert store.asset == NoAsset()


@pytest.mark.asyncio
async def test_remove_selection_returns_to_no_asset(blob):
    store = AssetReferenceStore(blob)
    store.load("https://x/y.jpg")
    await store.select_file(make_file(2 * MB))

    store.remove_selection()

    assert store.asset == NoAsset()
    assert store.reference == ""
    assert store.progress == IDLE_PROGRESS
    assert store.preview is None
    assert store.manual_reference_editable is True
    assert blob.deleted == []


@pytest.mark.asyncio
async def test_upload_success_becomes_uploaded_reference(blob):
    store = AssetReferenceStore(blob)
    await store.select_file(make_file(2 * MB))

    ref = await store.upload("clients")

    assert ref.startswith(PUBLIC_BASE + "clients/")
    assert store.asset == ReferencedAsset(ref, AssetSource.UPLOADED)
    assert store.progress == UploadProgress(100, False, None)


@pytest.mark.asyncio
async def test_failed_upload_drops_file_and_restores_previous_reference():
    blob = ScriptedBlobStore([("progress", 30), ("fail", "quota exceeded")])
    store = AssetReferenceStore(blob)
    store.load("https://x/y.jpg")
    await store.select_file(make_file(2 * MB))

    with pytest.raises(TransferError) as exc:
        await store.upload("news")

    assert str(exc.value) == "quota exceeded"
    assert store.pending_file is None
    assert store.reference == "https://x/y.jpg"
    assert store.progress == UploadProgress(30, False, "quota exceeded")


@pytest.mark.asyncio
async def test_new_selection_resets_progress_after_failure():
    blob = ScriptedBlobStore([("fail", "boom")])
    store = AssetReferenceStore(blob)
    await store.select_file(make_file(2 * MB))
    with pytest.raises(TransferError):
        await store.upload("news")
    assert store.progress.last_error == "boom"

    await store.select_file(make_file(3 * MB))

    assert store.progress == IDLE_PROGRESS


@pytest.mark.asyncio
async def test_file_input_disabled_during_transfer():
    blob = ScriptedBlobStore([("progress", 10)])
    store = AssetReferenceStore(blob)
    await store.select_file(make_file(2 * MB))

    task = asyncio.create_task(store.upload("news"))
    for _ in range(5):
        await asyncio.sleep(0)
    assert store.is_transferring
    assert store.file_input_enabled is False

    with pytest.raises(AppError):
        await store.select_file(make_file(2 * MB))

    store.remove_selection()
    with pytest.raises(TransferError):
        await asyncio.wait_for(task, timeout=1)
    assert store.asset == NoAsset()
