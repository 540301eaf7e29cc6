"""ProfileImageService: lookup, replace-on-upload, removal, cleanup failures."""

from __future__ import annotations

import pytest

from src.files.access import AccessEvaluator
from src.files.profile import ProfileImageService
from src.files.service import PresignedFileService
from src.files.settings import FileServiceSettings
from src.shared.errors import InvalidMetadataError, NotFoundError
from src.shared.types import FileCategory, UploadMetadata
from tests.fakes import (
    FakeObjectStorage,
    InMemoryFileRecordStore,
    InMemoryUserProfiles,
    make_record,
)

_MIB = 1024 * 1024


def _image(name: str = "me.png", size: int = 4096) -> UploadMetadata:
    return UploadMetadata(original_filename=name, content_type="image/png", size=size)


@pytest.fixture
def profiles() -> InMemoryUserProfiles:
    return InMemoryUserProfiles({"u1": "", "u2": ""})


@pytest.fixture
def profile_service(
    file_service: PresignedFileService,
    records: InMemoryFileRecordStore,
    profiles: InMemoryUserProfiles,
) -> ProfileImageService:
    return ProfileImageService(
        files=file_service,
        records=records,
        profiles=profiles,
        max_size=5 * _MIB,
    )


@pytest.mark.unit
class TestUploadProfileImage:
    async def test_first_upload_sets_pointer(
        self,
        profile_service: ProfileImageService,
        profiles: InMemoryUserProfiles,
        storage: FakeObjectStorage,
    ) -> None:
        grant = await profile_service.upload_profile_image("u1", _image())

        assert grant.record.category is FileCategory.PROFILE
        assert grant.record.object_key.startswith("uploads/profile/u1/")
        assert profiles.images["u1"] == grant.record.stored_name
        assert storage.delete_calls == []

    async def test_replacement_deletes_previous(
        self,
        profile_service: ProfileImageService,
        profiles: InMemoryUserProfiles,
        records: InMemoryFileRecordStore,
        storage: FakeObjectStorage,
    ) -> None:
        first = await profile_service.upload_profile_image("u1", _image("a.png"))
        second = await profile_service.upload_profile_image("u1", _image("b.png"))

        assert first.record.file_id not in records.records
        assert second.record.file_id in records.records
        assert storage.delete_calls == [("chat-files-test", first.record.object_key)]
        assert profiles.images["u1"] == second.record.stored_name

    async def test_non_image_rejected(
        self,
        profile_service: ProfileImageService,
        records: InMemoryFileRecordStore,
    ) -> None:
        meta = UploadMetadata(original_filename="cv.pdf", content_type="application/pdf", size=10)
        with pytest.raises(InvalidMetadataError):
            await profile_service.upload_profile_image("u1", meta)
        assert records.records == {}

    async def test_too_large_rejected(self, profile_service: ProfileImageService) -> None:
        with pytest.raises(InvalidMetadataError) as exc_info:
            await profile_service.upload_profile_image("u1", _image(size=6 * _MIB))
        assert exc_info.value.rule == "profile_size_limit"

    async def test_unknown_user(
        self,
        profile_service: ProfileImageService,
        records: InMemoryFileRecordStore,
        storage: FakeObjectStorage,
    ) -> None:
        with pytest.raises(NotFoundError):
            await profile_service.upload_profile_image("ghost", _image())
        assert records.records == {}
        assert storage.upload_calls == []

    async def test_stale_pointer_ignored(
        self,
        profile_service: ProfileImageService,
        profiles: InMemoryUserProfiles,
        storage: FakeObjectStorage,
    ) -> None:
        profiles.images["u1"] = "1_deadbeefdeadbeef.png"

        grant = await profile_service.upload_profile_image("u1", _image())
        assert profiles.images["u1"] == grant.record.stored_name
        assert storage.delete_calls == []

    async def test_pointer_to_foreign_file_not_deleted(
        self,
        profile_service: ProfileImageService,
        profiles: InMemoryUserProfiles,
        records: InMemoryFileRecordStore,
    ) -> None:
        foreign = make_record(uploader_id="u2", category=FileCategory.PROFILE)
        records.records[foreign.file_id] = foreign
        profiles.images["u1"] = foreign.stored_name

        grant = await profile_service.upload_profile_image("u1", _image())
        assert foreign.file_id in records.records
        assert profiles.images["u1"] == grant.record.stored_name

    async def test_cleanup_failure_does_not_block(
        self,
        records: InMemoryFileRecordStore,
        access: AccessEvaluator,
        settings: FileServiceSettings,
        profiles: InMemoryUserProfiles,
    ) -> None:
        files = PresignedFileService(
            records=records,
            storage=FakeObjectStorage(fail_deletes=True),
            access=access,
            settings=settings,
        )
        service = ProfileImageService(
            files=files, records=records, profiles=profiles, max_size=5 * _MIB
        )
        first = await service.upload_profile_image("u1", _image())
        second = await service.upload_profile_image("u1", _image())

        assert first.record.file_id not in records.records
        assert profiles.images["u1"] == second.record.stored_name


@pytest.mark.unit
class TestRemoveProfileImage:
    async def test_removes_current(
        self,
        profile_service: ProfileImageService,
        profiles: InMemoryUserProfiles,
        records: InMemoryFileRecordStore,
    ) -> None:
        grant = await profile_service.upload_profile_image("u1", _image())

        assert await profile_service.remove_profile_image("u1") is True
        assert profiles.images["u1"] == ""
        assert grant.record.file_id not in records.records

    async def test_nothing_set(self, profile_service: ProfileImageService) -> None:
        assert await profile_service.remove_profile_image("u2") is False

    async def test_unknown_user(self, profile_service: ProfileImageService) -> None:
        with pytest.raises(NotFoundError):
            await profile_service.remove_profile_image("ghost")


@pytest.mark.unit
class TestGetProfileImage:
    async def test_none_before_upload(self, profile_service: ProfileImageService) -> None:
        assert await profile_service.get_profile_image("u1") is None

    async def test_returns_current_after_replacement(
        self, profile_service: ProfileImageService
    ) -> None:
        await profile_service.upload_profile_image("u1", _image("a.png"))
        second = await profile_service.upload_profile_image("u1", _image("b.png"))
        assert await profile_service.get_profile_image("u1") == second.record.stored_name

    async def test_unknown_user(self, profile_service: ProfileImageService) -> None:
        with pytest.raises(NotFoundError):
            await profile_service.get_profile_image("ghost")
