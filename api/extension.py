"""
Admin Extension API.

Read-only views of the registered extensions and validation of their
settings forms. All routes require an authenticated admin.
"""

from typing import Any, Dict

from fastapi import APIRouter, Body, status

from core.dependencies import ExtensionsDep, ResponderDep
from core.middleware import middleware
from core.schemas.extension import ExtensionManifest, ManifestError

router = APIRouter(
    prefix="/admin/extensions",
    tags=["Admin Extensions"],
    dependencies=middleware("larke.admin"),
)


def _summary(manifest: ExtensionManifest, booted: bool) -> Dict[str, Any]:
    return {
        "name": manifest.name,
        "title": manifest.title,
        "description": manifest.description,
        "author": manifest.author,
        "version": manifest.version,
        "adaptation": manifest.adaptation,
        "require": manifest.require,
        "booted": booted,
    }


@router.get("")
async def list_extensions(extensions: ExtensionsDep, responder: ResponderDep):
    """All registered extensions."""
    data = [
        _summary(manifest, extensions.is_booted(manifest.name))
        for manifest in extensions.get_manifests()
    ]
    return responder.success(data={"list": data, "total": len(data)})


@router.get("/{name}")
async def get_extension(name: str, extensions: ExtensionsDep, responder: ResponderDep):
    """Manifest, settings fields and default settings of one extension."""
    extension = extensions.get_extension(name)
    if extension is None:
        return responder.error(
            f"扩展 '{name}' 不存在", status_code=status.HTTP_404_NOT_FOUND)

    manifest = extension.get_manifest()
    data = _summary(manifest, extensions.is_booted(name))
    data.update({
        "author_site": manifest.author_site,
        "author_email": manifest.author_email,
        "config": [field.model_dump(mode="json") for field in manifest.config],
        "default_config": manifest.default_config(),
    })
    return responder.success(data=data)


@router.post("/{name}/config")
async def validate_extension_config(
    name: str,
    extensions: ExtensionsDep,
    responder: ResponderDep,
    values: Dict[str, Any] = Body(...),
):
    """Validate submitted settings and return them normalised."""
    extension = extensions.get_extension(name)
    if extension is None:
        return responder.error(
            f"扩展 '{name}' 不存在", status_code=status.HTTP_404_NOT_FOUND)

    try:
        settings = extension.get_manifest().validate_config(values)
    except ManifestError as e:
        return responder.error(str(e), code=422)
    return responder.success("验证通过", data=settings)
