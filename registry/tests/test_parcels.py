from decimal import Decimal

from django.test import TestCase
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APIClient

from accounts.models import PermissionChoices, RoleChoices
from registry.models import AuditLog, Parcel
from .helpers import make_admin, make_owner, make_parcel, make_user


class ParcelApiTest(TestCase):
    """Parcel registration, editing and soft deletion"""

    def setUp(self):
        self.client = APIClient()
        self.admin = make_admin()
        self.registrar = make_user(
            RoleChoices.REGISTRAR,
            permissions=[PermissionChoices.CREATE_PARCEL, PermissionChoices.EDIT_PARCEL],
            regions=['Belgrade'],
        )
        self.owner = make_owner()
        self.payload = {
            'parcel_id': 'rs-bg-004213',
            'region': 'Belgrade',
            'district': 'Belgrade',
            'municipality': 'Vračar',
            'cadastral_municipality': 'Vračar',
            'city': 'Beograd',
            'latitude': '44.798000',
            'longitude': '20.476000',
            'area': '420.00',
            'land_type': Parcel.LandType.RESIDENTIAL,
            'land_use': Parcel.LandUse.BUILDING,
            'current_owner_id': self.owner.pk,
            'ownership_type': Parcel.OwnershipType.PRIVATE,
            'market_value': '210000.00',
            'tax_value': '180000.00',
        }

    def test_registrar_creates_parcel(self):
        """Test a registrar registers a parcel in their region"""
        self.client.force_authenticate(user=self.registrar)
        response = self.client.post(reverse('parcel-list'), self.payload, format='json')

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['message'], 'Parcel created successfully')
        self.assertEqual(response.data['data']['parcel_id'], 'RS-BG-004213')
        self.assertEqual(response.data['data']['current_owner']['id'], self.owner.pk)

        parcel = Parcel.objects.get(parcel_id='RS-BG-004213')
        self.assertEqual(parcel.verified_by, self.registrar)
        self.owner.refresh_from_db()
        self.assertEqual(self.owner.total_property_value, Decimal('210000.00'))
        self.assertTrue(
            AuditLog.objects.filter(
                event_type=AuditLog.EventType.PARCEL_CREATED,
                target_id=str(parcel.pk),
                region='Belgrade',
            ).exists()
        )

    def test_create_rejects_malformed_parcel_id(self):
        self.client.force_authenticate(user=self.registrar)
        self.payload['parcel_id'] = 'BG-4213'
        response = self.client.post(reverse('parcel-list'), self.payload, format='json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertFalse(response.data['success'])
        self.assertIn('parcel_id', response.data['errors'])

    def test_create_rejects_duplicate_parcel_id(self):
        make_parcel(parcel_id='RS-BG-004213')
        self.client.force_authenticate(user=self.registrar)
        response = self.client.post(reverse('parcel-list'), self.payload, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_create_outside_assigned_region_is_forbidden(self):
        self.client.force_authenticate(user=self.registrar)
        self.payload['region'] = 'Nišava'
        response = self.client.post(reverse('parcel-list'), self.payload, format='json')

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertFalse(Parcel.objects.filter(parcel_id='RS-BG-004213').exists())

    def test_clerk_cannot_create_parcel(self):
        """Test the create permission alone is not enough without the registrar role"""
        clerk = make_user(RoleChoices.CLERK, permissions=[PermissionChoices.CREATE_PARCEL], regions=['Belgrade'])
        self.client.force_authenticate(user=clerk)
        response = self.client.post(reverse('parcel-list'), self.payload, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_update_records_changed_fields(self):
        parcel = make_parcel(owner=self.owner)
        self.client.force_authenticate(user=self.registrar)
        response = self.client.patch(
            reverse('parcel-detail', kwargs={'pk': parcel.pk}),
            {'market_value': '175000.00', 'notes': 'Revalued'},
            format='json'
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        entry = AuditLog.objects.get(event_type=AuditLog.EventType.PARCEL_UPDATED)
        self.assertEqual(set(entry.fields_changed), {'market_value', 'notes'})
        self.assertEqual(entry.changes['before']['market_value'], '150000.00')

    def test_update_moves_owner_totals(self):
        """Test changing the owner refreshes both owners' portfolio totals"""
        parcel = make_parcel(owner=self.owner)
        self.owner.update_property_stats()
        buyer = make_owner()
        self.client.force_authenticate(user=self.registrar)

        response = self.client.patch(
            reverse('parcel-detail', kwargs={'pk': parcel.pk}),
            {'current_owner_id': buyer.pk},
            format='json'
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.owner.refresh_from_db()
        buyer.refresh_from_db()
        self.assertEqual(self.owner.total_property_value, Decimal('0'))
        self.assertEqual(buyer.total_property_value, Decimal('150000.00'))

    def test_only_admin_deletes_and_deletion_is_soft(self):
        parcel = make_parcel(owner=self.owner)

        self.client.force_authenticate(user=self.registrar)
        response = self.client.delete(reverse('parcel-detail', kwargs={'pk': parcel.pk}))
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

        self.client.force_authenticate(user=self.admin)
        response = self.client.delete(reverse('parcel-detail', kwargs={'pk': parcel.pk}))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['message'], 'Parcel deleted successfully')

        parcel.refresh_from_db()
        self.assertFalse(parcel.is_active)
        response = self.client.get(reverse('parcel-detail', kwargs={'pk': parcel.pk}))
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_detail_includes_history_and_restrictions(self):
        parcel = make_parcel(owner=self.owner, has_lien=True)
        parcel.restrictions.create(restriction_type='lien', description='Tax lien', amount=Decimal('5000'))
        self.client.force_authenticate(user=self.registrar)

        response = self.client.get(reverse('parcel-detail', kwargs={'pk': parcel.pk}))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['data']['ownership_history'], [])
        self.assertEqual(response.data['data']['restrictions'][0]['restriction_type'], 'lien')

    def test_detail_outside_region_is_forbidden(self):
        parcel = make_parcel(region='Nišava')
        self.client.force_authenticate(user=self.registrar)
        response = self.client.get(reverse('parcel-detail', kwargs={'pk': parcel.pk}))
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)


class ParcelListTest(TestCase):
    """Region scoping, filters, sorting and pagination on the parcel list"""

    def setUp(self):
        self.client = APIClient()
        self.registrar = make_user(RoleChoices.REGISTRAR, regions=['Belgrade', 'Kolubara'])
        self.minister = make_user(RoleChoices.MINISTER)
        owner = make_owner()
        self.belgrade = [
            make_parcel(owner=owner, region='Belgrade', area=Decimal('100') * (i + 1), city='Beograd')
            for i in range(3)
        ]
        self.valjevo = make_parcel(
            owner=owner, region='Kolubara', city='Valjevo',
            land_type=Parcel.LandType.AGRICULTURAL, legal_status=Parcel.LegalStatus.DISPUTED,
        )
        self.nis = make_parcel(owner=owner, region='Nišava', city='Niš')
        make_parcel(owner=owner, region='Belgrade', is_active=False)

    def parcel_ids(self, response):
        return {row['parcel_id'] for row in response.data['data']}

    def test_list_is_limited_to_assigned_regions(self):
        self.client.force_authenticate(user=self.registrar)
        response = self.client.get(reverse('parcel-list'))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['pagination']['total'], 4)
        self.assertNotIn(self.nis.parcel_id, self.parcel_ids(response))

    def test_minister_sees_all_regions(self):
        self.client.force_authenticate(user=self.minister)
        response = self.client.get(reverse('parcel-list'), {'region': 'All Regions'})
        self.assertEqual(response.data['pagination']['total'], 5)

    def test_region_parameter_outside_assignment_is_forbidden(self):
        self.client.force_authenticate(user=self.registrar)
        response = self.client.get(reverse('parcel-list'), {'region': 'Nišava'})
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_filters(self):
        self.client.force_authenticate(user=self.registrar)

        response = self.client.get(reverse('parcel-list'), {'legal_status': 'disputed'})
        self.assertEqual(self.parcel_ids(response), {self.valjevo.parcel_id})

        response = self.client.get(reverse('parcel-list'), {'land_type': 'All Statuses'})
        self.assertEqual(response.data['pagination']['total'], 4)

        response = self.client.get(reverse('parcel-list'), {'search': 'valj'})
        self.assertEqual(self.parcel_ids(response), {self.valjevo.parcel_id})

    def test_sorting_and_pagination(self):
        """Test sort_by/sort_order ordering and clamping of out-of-range pages"""
        self.client.force_authenticate(user=self.registrar)

        response = self.client.get(
            reverse('parcel-list'), {'region': 'Belgrade', 'sort_by': 'area', 'sort_order': 'asc', 'limit': 2}
        )
        self.assertEqual(response.data['pagination'], {'page': 1, 'limit': 2, 'total': 3, 'pages': 2})
        self.assertEqual(
            [row['parcel_id'] for row in response.data['data']],
            [self.belgrade[0].parcel_id, self.belgrade[1].parcel_id],
        )

        response = self.client.get(
            reverse('parcel-list'), {'region': 'Belgrade', 'sort_by': 'area', 'limit': 2, 'page': 9}
        )
        self.assertEqual(response.data['pagination']['page'], 2)
        self.assertEqual([row['parcel_id'] for row in response.data['data']], [self.belgrade[0].parcel_id])

    def test_unknown_sort_field_falls_back_to_default(self):
        self.client.force_authenticate(user=self.registrar)
        response = self.client.get(reverse('parcel-list'), {'sort_by': 'password'})
        self.assertEqual(response.status_code, status.HTTP_200_OK)

    def test_list_requires_authentication(self):
        response = self.client.get(reverse('parcel-list'))
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)


class OwnerApiTest(TestCase):
    """Owners are read-only over the API and visible to any signed-in user"""

    def setUp(self):
        self.client = APIClient()
        self.person = make_owner(first_name='Milica', last_name='Marković')
        self.company = make_owner(
            owner_type='corporation', first_name='', last_name='', company_name='Agro Šumadija doo'
        )
        self.client.force_authenticate(user=make_user(RoleChoices.VIEWER, regions=['Pirot']))

    def test_search_matches_company_name(self):
        response = self.client.get(reverse('owner-list'), {'search': 'Agro'})

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['pagination']['total'], 1)
        self.assertEqual(response.data['data'][0]['full_name'], 'Agro Šumadija doo')

    def test_retrieve(self):
        response = self.client.get(reverse('owner-detail', kwargs={'pk': self.person.pk}))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response.data['success'])
        self.assertEqual(response.data['data']['full_name'], 'Milica Marković')

    def test_owners_cannot_be_created_over_http(self):
        response = self.client.post(reverse('owner-list'), {'first_name': 'Ana'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_405_METHOD_NOT_ALLOWED)
