# apps/core/tests.py

from django.test import SimpleTestCase

from .exceptions import InvalidState, NotFound
from .results import action_error, action_result, service_action


class ServiceActionTestCase(SimpleTestCase):
    """Envelope produced by the operation boundary"""

    def test_success_payload_passes_through(self):
        @service_action("Failed to do it")
        def succeed():
            return action_result(total_score=4.0)

        self.assertEqual(succeed(), {'success': True, 'total_score': 4.0})

    def test_service_error_keeps_its_message(self):
        @service_action("Failed to do it")
        def reject():
            raise InvalidState("Cannot modify a published assignment")

        self.assertEqual(reject(), action_error("Cannot modify a published assignment"))

    def test_default_message_used_when_none_given(self):
        @service_action("Failed to do it")
        def missing():
            raise NotFound()

        self.assertEqual(missing(), {'success': False, 'error': 'Not found'})

    def test_unexpected_error_hidden_and_logged(self):
        @service_action("Failed to do it")
        def crash():
            raise KeyError('secret detail')

        with self.assertLogs('apps.core.results', level='ERROR') as logs:
            result = crash()
        self.assertEqual(result, {'success': False, 'error': 'Failed to do it'})
        self.assertIn('crash', logs.output[0])
