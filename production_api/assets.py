"""
Asset reconciliation for records that reference stored images and videos.

A record keeps a list of stored-object URLs. When an update submits a new set
of files, objects whose filename is not among the submitted names are removed,
every submitted file is uploaded, and the resulting URL list is handed back to
the caller to persist.

Filename equality is the only identity key. A client that wants to keep an
image unchanged must re-submit a file with the identical name; anything not
re-submitted is deleted. Two different files that share a name are treated as
the same asset.

Ordering: deletes are best-effort and never abort the request, uploads must
all succeed, and only then may the caller write the database record. A record
with several asset fields (project images and video) reconciles them together
so one upload batch covers the whole request.
"""

from __future__ import annotations

import concurrent.futures
import logging
from dataclasses import dataclass
from typing import BinaryIO, Iterable, Optional, Sequence

from fastapi import UploadFile

from production_api.errors import StorageError, ValidationError
from production_api.storage import StorageClient, key_from_url

logger = logging.getLogger(__name__)


@dataclass
class UploadedAsset:
    """A file submitted with a request."""

    filename: str
    content_type: str
    file: BinaryIO

    @classmethod
    def from_upload(cls, upload: UploadFile) -> "UploadedAsset":
        if not upload.filename:
            raise ValidationError("Uploaded file has no name")
        return cls(
            filename=upload.filename,
            content_type=upload.content_type or "application/octet-stream",
            file=upload.file,
        )


@dataclass
class ReconcilePlan:
    keep: list[str]
    delete: list[str]


def plan_reconciliation(
    existing_urls: Sequence[str], submitted_names: Iterable[str]
) -> ReconcilePlan:
    """Split existing URLs into those a submitted file shares a name with and the rest."""
    names = set(submitted_names)
    keep: list[str] = []
    delete: list[str] = []
    for url in existing_urls:
        (keep if key_from_url(url) in names else delete).append(url)
    return ReconcilePlan(keep=keep, delete=delete)


def single_group(url: Optional[str]) -> list[str]:
    """URL list for a nullable single-asset field."""
    return [url] if url else []


def _merge(kept: Sequence[str], uploaded: Sequence[str]) -> list[str]:
    """Survivors in their original order, then new URLs in submission order.

    A survivor that was uploaded again takes the freshly formatted URL in its
    original position, and no URL appears twice.
    """
    uploaded_by_key = {key_from_url(url): url for url in uploaded}
    kept_keys = [key_from_url(url) for url in kept]
    result = [uploaded_by_key.get(key, url) for key, url in zip(kept_keys, kept)]
    seen = set(kept_keys)
    for url in uploaded:
        key = key_from_url(url)
        if key not in seen:
            seen.add(key)
            result.append(url)
    return result


class AssetReconciler:
    """Runs storage fan-out for asset-bearing records."""

    def __init__(self, storage: StorageClient, max_workers: int = 5):
        self.storage = storage
        self.max_workers = max_workers

    def _run_all(self, fn, items: Sequence) -> list[tuple[object, Optional[Exception]]]:
        """Run ``fn`` over ``items`` concurrently and wait for every call to settle."""
        if not items:
            return []
        workers = min(self.max_workers, len(items))
        with concurrent.futures.ThreadPoolExecutor(max_workers=workers) as executor:
            futures = [executor.submit(fn, item) for item in items]
            concurrent.futures.wait(futures)
        results = []
        for item, future in zip(items, futures):
            exc = future.exception()
            results.append((item if exc else future.result(), exc))
        return results

    def _upload(self, asset: UploadedAsset) -> str:
        if hasattr(asset.file, "seek"):
            asset.file.seek(0)
        self.storage.store(asset.filename, asset.file, asset.content_type)
        return self.storage.public_url(asset.filename)

    def _remove(self, url: str) -> str:
        self.storage.remove(key_from_url(url))
        return url

    def upload_all(self, assets: Sequence[UploadedAsset]) -> list[str]:
        """Upload every asset and return their URLs in submission order.

        If any upload fails, the objects this call created are removed again
        and a StorageError is raised. Keys that already held an object before
        the call were only overwritten and are left in place, since other
        records may still reference them.
        """
        if not assets:
            return []
        keys = list(dict.fromkeys(asset.filename for asset in assets))
        probes = self._run_checked(self.storage.exists, keys, "Failed to look up stored object")
        existed = {key for key, present in zip(keys, probes) if present}

        results = self._run_all(self._upload, assets)
        failures = [exc for _, exc in results if exc is not None]
        if not failures:
            return [url for url, _ in results]

        created = [
            url for url, exc in results
            if exc is None and key_from_url(url) not in existed
        ]
        self.remove_best_effort(list(dict.fromkeys(created)))
        first = failures[0]
        logger.error("%d of %d uploads failed: %s", len(failures), len(assets), first)
        if isinstance(first, StorageError):
            raise first
        raise StorageError("Failed to upload file") from first

    def _run_checked(self, fn, items: Sequence, message: str) -> list:
        """Like ``_run_all`` but raises the first failure instead of returning it."""
        results = self._run_all(fn, items)
        for _, exc in results:
            if exc is not None:
                if isinstance(exc, StorageError):
                    raise exc
                raise StorageError(message) from exc
        return [value for value, _ in results]

    def remove_best_effort(self, urls: Sequence[str]) -> None:
        """Remove the objects behind ``urls``; failures are logged and skipped."""
        for url, exc in self._run_all(self._remove, urls):
            if exc is not None:
                logger.warning("Could not delete stored object %s: %s", url, exc)

    def remove_all(self, urls: Sequence[str]) -> None:
        """Remove the objects behind ``urls``; raise if any removal failed."""
        self._run_checked(self._remove, urls, "Failed to delete stored object")

    def reconcile_groups(
        self, groups: Sequence[tuple[Sequence[str], Sequence[UploadedAsset]]]
    ) -> list[list[str]]:
        """Reconcile several URL lists of one record as a single step.

        Each group pairs the URLs a field currently holds with the files
        submitted for it. Deletes for every group run first, then all files go
        up in one batch, so a failed upload in any group rolls back the new
        objects of every group. Returns one URL list per group.
        """
        plans = [
            plan_reconciliation(existing, [asset.filename for asset in assets])
            for existing, assets in groups
        ]
        self.remove_best_effort([url for plan in plans for url in plan.delete])

        uploaded = self.upload_all([asset for _, assets in groups for asset in assets])

        results = []
        offset = 0
        for plan, (_, assets) in zip(plans, groups):
            results.append(_merge(plan.keep, uploaded[offset:offset + len(assets)]))
            offset += len(assets)
        return results

    def reconcile(
        self, existing_urls: Sequence[str], assets: Sequence[UploadedAsset]
    ) -> list[str]:
        """Diff, delete, upload. Returns the URL list the record should hold."""
        return self.reconcile_groups([(existing_urls, assets)])[0]

    def replace_single(
        self, existing_url: Optional[str], asset: UploadedAsset
    ) -> str:
        """Cardinality-one variant used for a partner image or a project video.

        The old object is removed first (best-effort) unless the new file
        reuses its key, in which case the upload overwrites it. A failed
        upload raises and the caller keeps the old reference.
        """
        return self.reconcile_groups([(single_group(existing_url), [asset])])[0][0]
