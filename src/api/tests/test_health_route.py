"""Tests for the health check endpoint."""

import unittest
from unittest.mock import patch, MagicMock

from fastapi.testclient import TestClient
from pymongo.errors import ServerSelectionTimeoutError

from api.main import app


class TestHealth(unittest.TestCase):

    def setUp(self):
        self.client = TestClient(app)

    @patch('api.routes.health.get_mongodb_client')
    def test_healthy_when_mongodb_pings(self, mock_get_client):
        mock_get_client.return_value = MagicMock()

        response = self.client.get('/api/health')

        self.assertEqual(response.status_code, 200)
        data = response.json()
        self.assertEqual(data['status'], 'OK')
        self.assertEqual(data['services']['mongodb']['status'], 'healthy')
        self.assertTrue(data['timestamp'].endswith('Z'))

    @patch('api.routes.health.get_mongodb_client')
    def test_degraded_when_mongodb_unavailable(self, mock_get_client):
        mock_get_client.return_value = None

        response = self.client.get('/api/health')

        self.assertEqual(response.status_code, 503)
        self.assertEqual(response.json()['status'], 'degraded')

    @patch('api.routes.health.get_mongodb_client')
    def test_degraded_when_ping_raises(self, mock_get_client):
        mock_client = MagicMock()
        mock_client.admin.command.side_effect = ServerSelectionTimeoutError('timed out')
        mock_get_client.return_value = mock_client

        response = self.client.get('/api/health')

        self.assertEqual(response.status_code, 503)
        self.assertIn('timed out', response.json()['services']['mongodb']['message'])

    def test_health_does_not_expose_configuration(self):
        with patch('api.routes.health.get_mongodb_client', return_value=MagicMock()):
            body = self.client.get('/api/health').text
        self.assertNotIn('JWT', body)
        self.assertNotIn('SECRET', body.upper())


if __name__ == '__main__':
    unittest.main()
