"""
Unit Tests for callback extraction and reconciliation
"""

from unittest.mock import patch

import pytest

from paystore.models import CallbackResult, PendingTransaction
from paystore.services.callback_service import (
    CallbackService,
    extract_stk_callback,
    first_present,
    is_success_code,
    CHECKOUT_REQUEST_ID_FIELDS,
    RESULT_CODE_FIELDS,
)


STK = {'CheckoutRequestID': 'abc123', 'ResultCode': 0, 'ResultDesc': 'Success'}


class TestExtraction:

    @pytest.mark.parametrize('body', [
        {'Body': {'stkCallback': STK}},
        {'StkCallback': STK},
        {'stkCallback': STK},
        STK,
    ])
    def test_tolerated_shapes(self, body):
        assert extract_stk_callback(body) == STK

    def test_priority_order(self):
        body = {
            'Body': {'stkCallback': {'CheckoutRequestID': 'nested'}},
            'StkCallback': {'CheckoutRequestID': 'pascal'},
            'stkCallback': {'CheckoutRequestID': 'camel'},
        }
        assert extract_stk_callback(body)['CheckoutRequestID'] == 'nested'

        del body['Body']
        assert extract_stk_callback(body)['CheckoutRequestID'] == 'pascal'

    def test_body_without_stk_callback_is_flat(self):
        body = {'Body': {'somethingElse': {}}, 'CheckoutRequestID': 'flat'}
        assert extract_stk_callback(body) is body

    @pytest.mark.parametrize('body', [None, [], 'text', 42])
    def test_non_dict_bodies(self, body):
        assert extract_stk_callback(body) == {}

    def test_first_present_skips_missing(self):
        assert first_present({'resultCode': 1032}, RESULT_CODE_FIELDS) == 1032
        assert first_present({}, RESULT_CODE_FIELDS) is None

    def test_zero_result_code_is_present(self):
        assert first_present({'ResultCode': 0, 'resultCode': 1}, RESULT_CODE_FIELDS) == 0

    def test_empty_string_falls_through(self):
        payload = {'CheckoutRequestID': '', 'checkoutRequestID': 'ws_CO_9'}
        assert first_present(payload, CHECKOUT_REQUEST_ID_FIELDS) == 'ws_CO_9'
        assert first_present({'ResultCode': '', 'resultCode': 0}, RESULT_CODE_FIELDS) == 0

    @pytest.mark.parametrize('code, expected', [
        (0, True),
        ('0', True),
        (' 0 ', True),
        (1, False),
        (1032, False),
        ('1032', False),
        (None, False),
        (False, False),
        ('', False),
    ])
    def test_is_success_code(self, code, expected):
        assert is_success_code(code) is expected


class TestCallbackService:

    def test_success_callback_reconciles(self, session, sample_pending):
        CallbackService.receive_callback({'Body': {'stkCallback': STK}})

        pending = session.get(PendingTransaction, sample_pending.id)
        assert pending.status == 'success'
        assert pending.result_code == '0'
        assert pending.result_desc == 'Success'
        assert pending.callback_at is not None

        result = session.get(CallbackResult, 'abc123')
        assert result.raw == {'Body': {'stkCallback': STK}}
        assert result.checkout_request_id == 'abc123'
        assert result.result_code == '0'

    def test_failure_callback(self, session, sample_pending):
        CallbackService.receive_callback({'stkCallback': {
            'checkoutRequestID': 'abc123',
            'resultCode': 1032,
            'resultDesc': 'Request cancelled by user',
        }})

        pending = session.get(PendingTransaction, sample_pending.id)
        assert pending.status == 'failed'
        assert pending.result_code == '1032'
        assert pending.result_desc == 'Request cancelled by user'

    def test_missing_result_code_marks_failed(self, session, sample_pending):
        CallbackService.receive_callback({'CheckoutRequestID': 'abc123'})

        assert session.get(PendingTransaction, sample_pending.id).status == 'failed'

    def test_empty_pascal_case_id_falls_back_to_camel_case(self, session, sample_pending):
        CallbackService.receive_callback({
            'CheckoutRequestID': '',
            'checkoutRequestID': 'abc123',
            'ResultCode': 0,
        })

        assert session.get(PendingTransaction, sample_pending.id).status == 'success'
        assert session.get(CallbackResult, 'abc123') is not None

    def test_unknown_checkout_id_still_stored(self, session, sample_pending):
        CallbackService.receive_callback({'Body': {'stkCallback': dict(STK, CheckoutRequestID='nope')}})

        assert session.get(CallbackResult, 'nope') is not None
        assert session.get(PendingTransaction, sample_pending.id).status == 'pending'

    def test_no_checkout_id_gets_generated_key(self, session):
        result = CallbackService.receive_callback({'ResultCode': 1})

        assert result.id
        assert result.checkout_request_id is None
        assert session.query(CallbackResult).count() == 1

    def test_redelivery_without_checkout_id_creates_two_records(self, session):
        body = {'ResultCode': 1, 'ResultDesc': 'failed'}
        first = CallbackService.receive_callback(body)
        second = CallbackService.receive_callback(body)

        assert first.id != second.id
        assert session.query(CallbackResult).count() == 2

    def test_redelivery_with_checkout_id_overwrites(self, session):
        CallbackService.receive_callback({'CheckoutRequestID': 'dup', 'ResultCode': 1, 'ResultDesc': 'first'})
        CallbackService.receive_callback({'CheckoutRequestID': 'dup', 'ResultCode': 0, 'ResultDesc': 'second'})

        assert session.query(CallbackResult).count() == 1
        result = session.get(CallbackResult, 'dup')
        assert result.result_desc == 'second'
        assert result.result_code == '0'

    def test_first_matching_pending_wins(self, session):
        older = PendingTransaction(msisdn='254712345678', amount=1, checkout_request_id='twin', status='pending')
        session.add(older)
        session.commit()
        newer = PendingTransaction(msisdn='254712345678', amount=2, checkout_request_id='twin', status='pending')
        session.add(newer)
        session.commit()

        CallbackService.receive_callback({'CheckoutRequestID': 'twin', 'ResultCode': 0})

        statuses = {p.amount: p.status for p in session.query(PendingTransaction).all()}
        assert sorted(statuses.values()) == ['pending', 'success']

    def test_deferred_reconciliation_disabled_by_default(self, app, session):
        with patch.object(CallbackService, 'schedule_deferred_reconciliation') as mock_schedule:
            CallbackService.receive_callback({'CheckoutRequestID': 'early', 'ResultCode': 0})

        mock_schedule.assert_not_called()

    def test_deferred_reconciliation_scheduled_when_enabled(self, app, session, monkeypatch):
        monkeypatch.setitem(app.config, 'DEFERRED_RECONCILIATION_ENABLED', True)

        with patch.object(CallbackService, 'schedule_deferred_reconciliation') as mock_schedule:
            CallbackService.receive_callback({'CheckoutRequestID': 'early', 'ResultCode': 0})

        mock_schedule.assert_called_once_with('early')

    def test_deferred_reconciliation_not_scheduled_on_match(self, app, session, sample_pending, monkeypatch):
        monkeypatch.setitem(app.config, 'DEFERRED_RECONCILIATION_ENABLED', True)

        with patch.object(CallbackService, 'schedule_deferred_reconciliation') as mock_schedule:
            CallbackService.receive_callback({'Body': {'stkCallback': STK}})

        mock_schedule.assert_not_called()
