"""Tests for /api/admin routes."""

import unittest

from fastapi.testclient import TestClient

from api.config import get_credential_service
from api.dependencies import get_user_repo
from api.main import app
from adapter.fake.user_repository import FakeUserRepository
from domain.model.token import TokenClaims
from domain.model.user import Role
from services.credential_service import CredentialService


class TestAdminRoutes(unittest.TestCase):

    def setUp(self):
        self.repo = FakeUserRepository()
        self.credentials = CredentialService(secret='admin-test-secret', bcrypt_rounds=4)
        app.dependency_overrides[get_user_repo] = lambda: self.repo
        app.dependency_overrides[get_credential_service] = lambda: self.credentials
        self.client = TestClient(app)

        self.admin = self.repo.create('admin@example.com', self.credentials.hash_password('Admin@123'), Role.ADMIN)
        self.user = self.repo.create('user@example.com', self.credentials.hash_password('User@123'))

    def tearDown(self):
        app.dependency_overrides.clear()

    def _auth(self, user) -> dict:
        token = self.credentials.issue_token(TokenClaims.for_user(user))
        return {'Authorization': f'Bearer {token}'}

    def test_admin_lists_users(self):
        response = self.client.get('/api/admin/users', headers=self._auth(self.admin))

        self.assertEqual(response.status_code, 200)
        emails = {u['email'] for u in response.json()['users']}
        self.assertEqual(emails, {'admin@example.com', 'user@example.com'})
        for user in response.json()['users']:
            self.assertNotIn('password_hash', user)

    def test_list_users_pagination(self):
        response = self.client.get('/api/admin/users?skip=0&limit=1', headers=self._auth(self.admin))
        self.assertEqual(response.status_code, 200)
        self.assertEqual(len(response.json()['users']), 1)
        self.assertEqual(response.json()['limit'], 1)

    def test_regular_user_forbidden(self):
        response = self.client.get('/api/admin/users', headers=self._auth(self.user))
        self.assertEqual(response.status_code, 403)
        self.assertEqual(response.json()['detail'], 'Admin access required')

    def test_anonymous_unauthorized(self):
        response = self.client.get('/api/admin/users')
        self.assertEqual(response.status_code, 401)

    def test_admin_deletes_user(self):
        response = self.client.delete(f'/api/admin/users/{self.user.id}', headers=self._auth(self.admin))
        self.assertEqual(response.status_code, 204)
        self.assertIsNone(self.repo.get_by_id(self.user.id))

    def test_delete_unknown_user_returns_404(self):
        response = self.client.delete('/api/admin/users/missing', headers=self._auth(self.admin))
        self.assertEqual(response.status_code, 404)

    def test_admin_cannot_delete_self(self):
        response = self.client.delete(f'/api/admin/users/{self.admin.id}', headers=self._auth(self.admin))
        self.assertEqual(response.status_code, 400)
        self.assertIsNotNone(self.repo.get_by_id(self.admin.id))

    def test_regular_user_cannot_delete(self):
        response = self.client.delete(f'/api/admin/users/{self.admin.id}', headers=self._auth(self.user))
        self.assertEqual(response.status_code, 403)
        self.assertIsNotNone(self.repo.get_by_id(self.admin.id))


if __name__ == '__main__':
    unittest.main()
