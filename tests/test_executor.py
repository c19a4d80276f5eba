"""Tests for the execution controller."""

import asyncio

import pytest

from automation_engine import (
    ControllerState,
    ExecutionController,
    ExecutionStatus,
    Platform,
    StepHandler,
    create_default_registry,
    execute_automation,
)
from automation_engine.executor import CANCELLED_ERROR, NO_COMPATIBLE_STEPS_ERROR


class ExplodingStep(StepHandler):
    step_type = 'explode'

    def validate(self, config):
        pass

    async def execute(self, config, context):
        raise ValueError("kaboom")


class SoftFailStep(StepHandler):
    step_type = 'soft-fail'

    def validate(self, config):
        pass

    async def execute(self, config, context):
        return {'success': False, 'error': 'not today'}


@pytest.fixture
def registry():
    return create_default_registry()


def notify(message, **extra):
    return {'type': 'notification', 'config': {'message': message}, **extra}


class TestExecuteAutomation:

    @pytest.mark.asyncio
    async def test_runs_steps_in_order(self, registry, platform, notifications, make_automation):
        automation = make_automation(notify('one'), notify('two'), notify('three'))

        result = await execute_automation(automation, registry, platform)

        assert result.success is True
        assert result.status == ExecutionStatus.COMPLETED
        assert result.steps_completed == 3
        assert result.total_steps == 3
        assert result.error is None
        assert [message for _, message in notifications.shown] == ['one', 'two', 'three']
        assert result.timestamp.endswith('Z')

    @pytest.mark.asyncio
    async def test_failure_stops_the_run(self, registry, platform, http, notifications, make_automation):
        http.status_code = 500
        automation = make_automation(
            {'type': 'set-variable', 'config': {'name': 'a', 'value': 1}},
            {'type': 'webhook', 'config': {'url': 'https://hooks.example.com/x'}},
            notify('never'),
        )

        result = await execute_automation(automation, registry, platform)

        assert result.success is False
        assert result.status == ExecutionStatus.FAILED
        assert result.steps_completed == 1
        assert result.failed_step == 1
        assert result.error_type == 'ExternalFailureError'
        assert 'HTTP 500' in result.error
        assert notifications.shown == []
        assert [r.success for r in result.step_results] == [True, False]

    @pytest.mark.asyncio
    async def test_configuration_error_names_field(self, registry, platform, make_automation):
        automation = make_automation({'type': 'sms', 'config': {'message': 'hi'}})

        result = await execute_automation(automation, registry, platform)

        assert result.failed_step == 0
        assert result.error_type == 'ConfigurationError'
        assert 'phoneNumber' in result.error

    @pytest.mark.asyncio
    async def test_all_steps_disabled(self, registry, platform, notifications, make_automation):
        automation = make_automation(notify('a', enabled=False), notify('b', enabled=False))

        result = await execute_automation(automation, registry, platform)

        assert result.success is True
        assert result.steps_completed == 0
        assert result.total_steps == 2
        assert notifications.shown == []
        assert all(r.skipped for r in result.step_results)

    @pytest.mark.asyncio
    async def test_disabled_step_is_skipped(self, registry, platform, notifications, make_automation):
        automation = make_automation(notify('a'), notify('b', enabled=False), notify('c'))

        result = await execute_automation(automation, registry, platform)

        assert result.steps_completed == 2
        assert result.total_steps == 3
        assert [message for _, message in notifications.shown] == ['a', 'c']

    @pytest.mark.asyncio
    async def test_incompatible_steps_are_filtered(self, registry, notifications, make_automation):
        platform = Platform(notifications=notifications)
        automation = make_automation(
            {'type': 'sms', 'config': {'phoneNumber': '+1555', 'message': 'hi'}},
            notify('shown'),
            {'type': 'webhook', 'config': {'url': 'https://example.com'}},
        )

        result = await execute_automation(automation, registry, platform)

        assert result.success is True
        assert result.total_steps == 1
        assert result.steps_completed == 1
        assert notifications.shown == [('Notification', 'shown')]

    @pytest.mark.asyncio
    async def test_no_compatible_steps(self, registry, make_automation):
        automation = make_automation({'type': 'sms', 'config': {'phoneNumber': '+1555', 'message': 'hi'}})

        result = await execute_automation(automation, registry, Platform())

        assert result.success is False
        assert result.error == NO_COMPATIBLE_STEPS_ERROR
        assert result.total_steps == 0
        assert result.steps_completed == 0

    @pytest.mark.asyncio
    async def test_explicit_capabilities(self, registry, platform, notifications, messaging, make_automation):
        automation = make_automation(
            notify('hi'),
            {'type': 'sms', 'config': {'phoneNumber': '+1555', 'message': 'hi'}},
        )

        result = await execute_automation(automation, registry, platform, capabilities={'sms'})

        assert result.total_steps == 1
        assert notifications.shown == []
        assert messaging.sms == [('+1555', 'hi')]

    @pytest.mark.asyncio
    async def test_variables_flow_between_steps(self, registry, platform, notifications, make_automation):
        automation = make_automation(
            {'type': 'set-variable', 'config': {'name': 'greeting', 'value': 'Hello'}},
            {'type': 'text-op', 'config': {'action': 'uppercase', 'text1': '{{greeting}}'}},
            notify('{{greeting}}, {{name}}! {{missing}}'),
        )

        result = await execute_automation(automation, registry, platform, initial_variables={'name': 'Ann'})

        assert result.success is True
        assert notifications.shown == [('Notification', 'Hello, Ann! ')]
        assert result.step_results[1].output['result'] == 'HELLO'

    @pytest.mark.asyncio
    async def test_initial_variables_are_not_mutated(self, registry, platform, make_automation):
        initial = {'count': 1}
        automation = make_automation({'type': 'set-variable', 'config': {'name': 'count', 'value': 2}})
        controller = ExecutionController(registry, platform)

        await controller.start(automation, initial)

        assert initial == {'count': 1}
        assert controller.variables['count'] == 2

    @pytest.mark.asyncio
    async def test_step_config_is_not_mutated(self, registry, platform, make_automation):
        automation = make_automation(notify('Hi {{name}}'))

        await execute_automation(automation, registry, platform, initial_variables={'name': 'Ann'})

        assert automation.steps[0].config == {'message': 'Hi {{name}}'}

    @pytest.mark.asyncio
    async def test_unexpected_exception(self, registry, platform, make_automation):
        registry.register(ExplodingStep())
        automation = make_automation({'type': 'explode'})

        result = await execute_automation(automation, registry, platform)

        assert result.success is False
        assert result.error == 'kaboom'
        assert result.error_type == 'UnexpectedError'
        assert result.failed_step == 0

    @pytest.mark.asyncio
    async def test_handler_reported_failure(self, registry, platform, make_automation):
        registry.register(SoftFailStep())
        automation = make_automation({'type': 'soft-fail'})

        result = await execute_automation(automation, registry, platform)

        assert result.success is False
        assert result.error == 'not today'
        assert result.error_type == 'StepError'

    @pytest.mark.asyncio
    async def test_delay_uses_platform_sleep(self, registry, platform, sleep, make_automation):
        automation = make_automation({'type': 'delay', 'config': {'delay': '{{wait}}'}})

        result = await execute_automation(automation, registry, platform, initial_variables={'wait': 250})

        assert result.success is True
        assert sleep.calls == [0.25]

    @pytest.mark.asyncio
    async def test_real_delay_is_reflected_in_execution_time(self, registry, notifications, make_automation):
        platform = Platform(notifications=notifications)
        automation = make_automation(
            notify('before'),
            {'type': 'delay', 'config': {'delay': 1000}},
            notify('after'),
        )

        result = await execute_automation(automation, registry, platform)

        assert result.success is True
        assert result.steps_completed == 3
        assert result.execution_time >= 1000
        assert len(notifications.shown) == 2

    @pytest.mark.asyncio
    async def test_result_to_dict(self, registry, platform, make_automation):
        result = await execute_automation(make_automation(notify('hi')), registry, platform)

        data = result.to_dict()

        assert data['success'] is True
        assert data['stepsCompleted'] == 1
        assert data['stepResults'][0]['stepId'] == 's0'


class TestExecutionController:

    @pytest.mark.asyncio
    async def test_cancel_between_steps(self, registry, platform, notifications, make_automation):
        automation = make_automation(notify('one'), notify('two'), notify('three'))
        controller = ExecutionController(
            registry, platform,
            on_step_complete=lambda index, step_result: controller.cancel(),
        )

        result = await controller.start(automation)

        assert result.success is False
        assert result.status == ExecutionStatus.CANCELLED
        assert result.error == CANCELLED_ERROR
        assert result.steps_completed == 1
        assert result.failed_step is None
        assert notifications.shown == [('Notification', 'one')]
        assert controller.state == ControllerState.CANCELLED

    @pytest.mark.asyncio
    async def test_cancel_during_delay(self, registry, notifications, make_automation):
        platform = Platform(notifications=notifications)
        automation = make_automation({'type': 'delay', 'config': {'delay': 50}}, notify('late'))
        controller = ExecutionController(registry, platform)

        async def cancel_soon():
            await asyncio.sleep(0.01)
            assert controller.cancel() is True

        result, _ = await asyncio.gather(controller.start(automation), cancel_soon())

        assert result.status == ExecutionStatus.CANCELLED
        assert result.steps_completed == 1
        assert notifications.shown == []

    @pytest.mark.asyncio
    async def test_cancel_after_completion(self, registry, platform, make_automation):
        controller = ExecutionController(registry, platform)
        result = await controller.start(make_automation(notify('hi')))

        assert result.success is True
        assert controller.state == ControllerState.COMPLETED
        assert controller.cancel() is False

    @pytest.mark.asyncio
    async def test_is_running_only_during_the_run(self, registry, platform, make_automation):
        seen = []
        controller = ExecutionController(
            registry, platform,
            on_step_start=lambda index, step: seen.append(controller.is_running),
        )
        assert controller.is_running is False

        await controller.start(make_automation(notify('a'), notify('b')))

        assert seen == [True, True]
        assert controller.is_running is False

    @pytest.mark.asyncio
    async def test_controller_runs_once(self, registry, platform, make_automation):
        controller = ExecutionController(registry, platform)
        await controller.start(make_automation(notify('hi')))

        with pytest.raises(RuntimeError):
            await controller.start(make_automation(notify('again')))

    @pytest.mark.asyncio
    async def test_callbacks(self, registry, platform, make_automation):
        events = []

        async def on_start(index, step):
            events.append(('start', index, step.type))

        def on_complete(index, step_result):
            events.append(('complete', index, step_result.success))

        def on_error(index, error):
            events.append(('error', index, error))

        automation = make_automation(notify('ok'), {'type': 'sms', 'config': {}})
        controller = ExecutionController(
            registry, platform,
            on_step_start=on_start,
            on_step_complete=on_complete,
            on_step_error=on_error,
        )

        await controller.start(automation)

        assert events[:3] == [
            ('start', 0, 'notification'),
            ('complete', 0, True),
            ('start', 1, 'sms'),
        ]
        assert events[3][0:2] == ('error', 1)
        assert 'phoneNumber' in events[3][2]

    @pytest.mark.asyncio
    async def test_failing_callback_is_ignored(self, registry, platform, notifications, make_automation):
        def on_start(index, step):
            raise RuntimeError("listener broke")

        controller = ExecutionController(registry, platform, on_step_start=on_start)
        result = await controller.start(make_automation(notify('a'), notify('b')))

        assert result.success is True
        assert len(notifications.shown) == 2

    @pytest.mark.asyncio
    async def test_concurrent_runs_are_independent(self, registry, platform, make_automation):
        first = make_automation({'type': 'set-variable', 'config': {'name': 'who', 'value': 'first'}})
        second = make_automation({'type': 'get-variable', 'config': {'name': 'who'}})
        controller_a = ExecutionController(registry, platform)
        controller_b = ExecutionController(registry, platform)

        result_a, result_b = await asyncio.gather(
            controller_a.start(first),
            controller_b.start(second, {'who': 'second'}),
        )

        assert result_a.success and result_b.success
        assert controller_a.variables['who'] == 'first'
        assert controller_b.variables['who'] == 'second'
        assert result_b.step_results[0].output['value'] == 'second'
