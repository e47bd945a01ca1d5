"""
Advertisements, platform settings and the apartment directory (site_manager.py).
"""
import pytest

from conftest import PNG_DATA_URL
from models import UserRole
from utils.errors import ValidationError, AuthorizationError, NotFoundError, ConflictError


@pytest.fixture
def admin(make_user, principal_for):
    return principal_for(make_user(role=UserRole.ADMIN))


class TestAdvertisements:

    def test_create_uploads_image_and_applies_defaults(self, services, blob_store, admin):
        ad = services.site.create_advertisement(admin, {'title': ' Summer Camp ', 'image': PNG_DATA_URL})

        assert ad.title == 'Summer Camp'
        assert ad.image_url in blob_store.objects
        assert ad.image_url.startswith('/uploads/ads/')
        assert ad.placement == 'general'
        assert ad.is_active is True
        assert ad.link_url is None
        assert ad.user_id == admin.user_id

    @pytest.mark.parametrize('form, field', [
        ({'image': PNG_DATA_URL}, 'title'),
        ({'title': 'No image'}, 'image'),
        ({'title': 'Bad flag', 'image': PNG_DATA_URL, 'isActive': 'yes'}, 'isActive'),
    ])
    def test_create_validation(self, services, store, admin, form, field):
        with pytest.raises(ValidationError) as exc:
            services.site.create_advertisement(admin, form)
        assert exc.value.field == field
        assert not store.advertisements

    def test_player_cannot_create(self, services, make_user, principal_for):
        with pytest.raises(AuthorizationError):
            services.site.create_advertisement(principal_for(make_user()),
                                               {'title': 'Mine', 'image': PNG_DATA_URL})

    def test_update_keeps_image_unless_new_data_url(self, services, blob_store, admin):
        ad = services.site.create_advertisement(admin, {'title': 'Camp', 'image': PNG_DATA_URL})

        updated = services.site.update_advertisement(admin, ad.id, {
            'title': 'Camp 2026', 'image': ad.image_url, 'linkUrl': 'https://example.com', 'placement': 'sidebar',
        })
        assert updated.image_url == ad.image_url
        assert (updated.title, updated.link_url, updated.placement) == ('Camp 2026', 'https://example.com', 'sidebar')

        replaced = services.site.update_advertisement(admin, ad.id, {'title': 'Camp 2026', 'image': PNG_DATA_URL})
        assert replaced.image_url != ad.image_url
        assert len(blob_store.objects) == 2

    def test_update_requires_title(self, services, admin):
        ad = services.site.create_advertisement(admin, {'title': 'Camp', 'image': PNG_DATA_URL})
        with pytest.raises(ValidationError):
            services.site.update_advertisement(admin, ad.id, {'title': '  '})

    def test_toggle_and_delete(self, services, store, admin):
        ad = services.site.create_advertisement(admin, {'title': 'Camp', 'image': PNG_DATA_URL})

        assert services.site.toggle_advertisement(admin, ad.id, False).is_active is False
        assert store.advertisements[ad.id].is_active is False

        services.site.delete_advertisement(admin, ad.id)
        assert not store.advertisements
        with pytest.raises(NotFoundError):
            services.site.delete_advertisement(admin, ad.id)
        with pytest.raises(NotFoundError):
            services.site.toggle_advertisement(admin, ad.id, True)

    def test_list_is_newest_first(self, services, admin):
        first = services.site.create_advertisement(admin, {'title': 'One', 'image': PNG_DATA_URL})
        second = services.site.create_advertisement(admin, {'title': 'Two', 'image': PNG_DATA_URL})
        assert [a.id for a in services.site.list_advertisements()] == [second.id, first.id]


class TestPlatformSettings:

    def test_defaults_before_first_save(self, services):
        settings = services.site.get_settings()
        assert settings.platform_name == 'Sports Paramount'
        assert settings.logo_url == ''

    def test_update_merges_with_current_values(self, services, blob_store, admin):
        services.site.update_settings(admin, {
            'platformName': 'City Sports', 'supportEmail': 'Help@Example.com', 'logoUrl': PNG_DATA_URL,
        })
        settings = services.site.update_settings(admin, {'supportPhone': '9876543210'})

        assert settings.platform_name == 'City Sports'
        assert settings.support_email == 'help@example.com'
        assert settings.support_phone == '9876543210'
        assert settings.logo_url in blob_store.objects

    @pytest.mark.parametrize('form, field', [
        ({'platformName': ''}, 'platformName'),
        ({'supportEmail': 'not-an-email'}, 'supportEmail'),
        ({'logoUrl': 42}, 'logoUrl'),
    ])
    def test_invalid_settings(self, services, store, admin, form, field):
        with pytest.raises(ValidationError) as exc:
            services.site.update_settings(admin, form)
        assert exc.value.field == field
        assert store.settings is None


class TestApartments:

    def test_add_is_idempotent_by_name(self, services, store, admin):
        apartment, created = services.site.add_apartment(admin, {'name': ' Green Acres ', 'pincode': '560001'})
        assert created and apartment.name == 'Green Acres'

        again, created = services.site.add_apartment(admin, {'name': 'green acres'})
        assert not created
        assert again.id == apartment.id
        assert len(store.apartments) == 1

    def test_add_requires_string_name(self, services, admin):
        with pytest.raises(ValidationError) as exc:
            services.site.add_apartment(admin, {'name': 123})
        assert exc.value.field == 'name'

    def test_update_and_delete(self, services, store, admin):
        apartment, _ = services.site.add_apartment(admin, {'name': 'Green Acres'})
        other, _ = services.site.add_apartment(admin, {'name': 'Lake View'})

        updated = services.site.update_apartment(admin, apartment.id, {'zone': 'East', 'locality': 'Indiranagar'})
        assert (updated.name, updated.zone, updated.locality) == ('Green Acres', 'East', 'Indiranagar')

        with pytest.raises(ConflictError):
            services.site.update_apartment(admin, apartment.id, {'name': 'LAKE VIEW'})

        services.site.delete_apartment(admin, other.id)
        assert list(store.apartments) == [apartment.id]
        with pytest.raises(NotFoundError):
            services.site.update_apartment(admin, other.id, {'zone': 'West'})
