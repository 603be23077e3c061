from gmpanel.audit import (
    AuditContext,
    DeviceRecord,
    Info,
    Module,
    ProfileRecord,
    RequestInfo,
    ResponseInfo,
    UserIdentity,
)
from gmpanel.core.i18n import SYMBOL_NONAME, Translator

CHROME_UA = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)


class StubModel:
    def __init__(self, identifier):
        self.identifier = identifier

    def get_identifier(self):
        return self.identifier


class StubController:
    def __init__(self, action="edit", module=None, description=None, model=None):
        self.action = action
        self.module = module
        self.description = description
        self.last_data_model = model

    def translate_action(self, translator):
        return self.description


def _identity(**kwargs) -> UserIdentity:
    data = {"id": 42, "username": "alice", "permission": "ADMIN"}
    data.update(kwargs)
    return UserIdentity(**data)


def test_resolution_is_memoized():
    calls = []
    info = Info(AuditContext(identity=_identity()))

    def provider():
        calls.append(1)
        return 42

    info.providers["userId"] = provider

    assert info.define_property("userId") == 42
    assert info.define_property("userId") == 42
    assert len(calls) == 1


def test_provider_returning_none_is_called_once_and_omitted():
    calls = []
    info = Info()

    def provider():
        calls.append(1)
        return None

    info.providers["userName"] = provider

    assert info.define_property("userName") is None
    assert info.define_property("userName") is None
    assert len(calls) == 1
    assert "userName" not in info.all()


def test_preset_value_wins_over_provider():
    info = Info(AuditContext(identity=_identity()))
    info.set("userName", "preset")

    assert info.define_property("userName") == "preset"
    assert info.all()["userName"] == "preset"


def test_unknown_attribute_resolves_to_none():
    info = Info()

    assert info.define_property("note") is None
    assert info.all() == {}


def test_failing_provider_resolves_to_none():
    info = Info()

    def provider():
        raise RuntimeError("boom")

    info.providers["requestUrl"] = provider

    assert info.define_property("requestUrl") is None
    assert "requestUrl" not in info


def test_set_error_overrides_response_outcome():
    context = AuditContext(response=ResponseInfo(status_code=200))
    info = Info(context)
    info.set_error("Record is locked", {"id": 5})

    assert info.define_property("success") == 0
    assert info.define_property("error") == "Record is locked"
    assert info.all()["errorParams"] == {"id": 5}


def test_user_attributes():
    identity = _identity(profile=ProfileRecord(call_name="Alice Smith"))
    info = Info(AuditContext(identity=identity))

    assert info.define_property("userId") == 42
    assert info.define_property("userName") == "alice"
    assert info.define_property("userDetail") == "Alice Smith"
    assert info.define_property("permission") == "ADMIN"


def test_anonymous_user_attributes_are_omitted():
    info = Info(AuditContext(request=RequestInfo(method="GET")))
    for name in ("userId", "userName", "userDetail", "permission"):
        info.define_property(name)

    assert info.all() == {}


def test_section_initializer_runs_once():
    calls = []
    identity = _identity()
    identity.get_profile = lambda: calls.append(1) or ProfileRecord(call_name="A")
    info = Info(AuditContext(identity=identity))

    info.init_section("user")
    info.init_section("user")
    info.define_property("userDetail")

    assert len(calls) == 1


def test_device_record_takes_precedence_over_user_agent():
    device = DeviceRecord(
        browser_name="Firefox 121",
        browser_family="Firefox",
        os_name="Linux",
        os_family="Linux",
    )
    context = AuditContext(
        request=RequestInfo(user_agent=CHROME_UA),
        identity=_identity(device=device),
    )
    info = Info(context)

    assert info.define_property("browserName") == "Firefox 121"
    assert info.define_property("osFamily") == "Linux"


def test_device_is_detected_from_user_agent_without_record():
    info = Info(AuditContext(request=RequestInfo(user_agent=CHROME_UA)))

    assert info.define_property("browserName") == "Chrome 120"
    assert info.define_property("browserFamily") == "Chrome"
    assert info.define_property("osName") == "Windows 10"
    assert info.define_property("osFamily") == "Windows"


def test_module_name_from_translator_or_module():
    translator = Translator({"users": {"{name}": "Users"}})
    controller = StubController(module=Module("users"))
    info = Info(AuditContext(controller=controller), translator=translator)
    assert info.define_property("moduleId") == "users"
    assert info.define_property("moduleName") == "Users"

    info = Info(AuditContext(controller=StubController(module=Module("files", "Files"))))
    assert info.define_property("moduleName") == "Files"

    info = Info(AuditContext(controller=StubController(module=Module("misc"))))
    assert info.define_property("moduleName") == SYMBOL_NONAME


def test_controller_attributes():
    info = Info(AuditContext(controller=StubController(action="delete")))

    assert info.define_property("controllerName") == "StubController"
    assert info.define_property("controllerAction") == "delete"
    assert info.define_property("controllerEvent").endswith("StubController::delete")


def test_controller_attributes_fall_back_to_endpoint():
    request = RequestInfo(endpoint_module="gmpanel.api.v1.endpoints.files", endpoint_name="upload")
    info = Info(AuditContext(request=request))

    assert info.define_property("controllerName") == "files"
    assert info.define_property("controllerAction") == "upload"
    assert info.define_property("controllerEvent") == "gmpanel.api.v1.endpoints.files::upload"


def test_query_id_from_data_model():
    info = Info(AuditContext(controller=StubController(model=StubModel(15))))
    assert info.define_property("queryId") == "15"

    info = Info(AuditContext(controller=StubController(model=StubModel({"id": 1, "lang": "en"}))))
    assert info.define_property("queryId") == '{"id": 1, "lang": "en"}'

    info = Info(AuditContext(controller=StubController(model=StubModel("x" * 150))))
    assert info.define_property("queryId") == "x" * 100


def test_query_id_without_identifier_is_empty():
    info = Info(AuditContext(controller=StubController(model=StubModel(None))))

    assert info.define_property("queryId") == ""


def test_query_id_numeric_check_is_strict():
    for identifier in ("12345", "-3.5", "1e5"):
        info = Info(AuditContext(controller=StubController(model=StubModel(identifier))))
        assert info.define_property("queryId") == identifier

    for identifier in ("1" + "_0" * 75, " " * 98 + "inf", " " * 98 + "nan"):
        info = Info(AuditContext(controller=StubController(model=StubModel(identifier))))
        assert info.define_property("queryId") == identifier[:100]


def test_query_id_from_route_or_zero():
    request = RequestInfo(route_params={"id": "7"})
    info = Info(AuditContext(request=request, controller=StubController()))
    assert info.define_property("queryId") == 7

    info = Info(AuditContext(request=RequestInfo(route_params={"id": "abc"}), controller=StubController()))
    assert info.define_property("queryId") == 0

    info = Info(AuditContext(request=request))
    assert info.define_property("queryId") == 0


def test_query_parameters():
    request = RequestInfo(params={"page": 2, "search": "a" * 300})
    info = Info(AuditContext(request=request))

    assert info.define_property("query") == f'page = "2"\nsearch = "{"a" * 256}"'

    info = Info(AuditContext(request=RequestInfo()))
    assert info.define_property("query") is None


def test_request_outcome_attributes():
    context = AuditContext(
        request=RequestInfo(method="POST", path="/api/v1/auth/login", ip="10.0.0.1"),
        response=ResponseInfo(status_code=401, error="Invalid credentials"),
    )
    info = Info(context)

    assert info.define_property("requestMethod") == "POST"
    assert info.define_property("requestUrl") == "/api/v1/auth/login"
    assert info.define_property("requestCode") == 401
    assert info.define_property("ipaddress") == "10.0.0.1"
    assert info.define_property("success") == 0
    assert info.define_property("error") == "Invalid credentials"
    assert info.define_property("errorCode") == 401


def test_successful_response_has_no_error():
    info = Info(AuditContext(response=ResponseInfo(status_code=201)))

    assert info.define_property("success") == 1
    assert info.define_property("error") is None
    assert info.define_property("errorCode") is None


def test_date_format():
    info = Info(timezone="Europe/Moscow")
    date = info.define_property("date")

    assert len(date) == 19
    assert date[4] == "-" and date[10] == " " and date[13] == ":"


def test_default_comment():
    identity = _identity(profile=ProfileRecord(call_name="Alice Smith"))
    controller = StubController(module=Module("users", "Users"), description="edit record")
    context = AuditContext(
        request=RequestInfo(ip="10.0.0.1"),
        identity=identity,
        controller=controller,
    )
    info = Info(context)
    info.set("date", "2026-10-19 10:00:00")
    for name in ("userName", "userDetail", "moduleName", "ipaddress"):
        info.define_property(name)

    assert info.define_property("comment") == (
        "Alice Smith at user account alice use: edit record from module Users "
        "at 2026-10-19 10:00:00 (UTC) from 10.0.0.1"
    )


def test_comment_placeholders_for_missing_values():
    info = Info(AuditContext(controller=StubController(description="")))

    assert info.define_property("comment") == (
        "<unknown> at user account <unknown> use: unknow from module  "
        "at <unknown> from <unknown>"
    )


def test_comment_uses_translation():
    translator = Translator(
        {
            "backend": {
                "<unknown>": "?",
                "{profile} at user account {user} use: {action} from module {module} "
                "at {date} from {ipaddress}": "{user} ({browser}, {os}): {action}",
            }
        }
    )
    context = AuditContext(
        request=RequestInfo(user_agent=CHROME_UA),
        identity=_identity(),
        controller=StubController(description="view"),
    )
    info = Info(context, translator=translator)
    info.define_property("userName")

    assert info.define_property("comment") == "alice (Chrome 120, Windows 10): view"
    assert "browserName" not in info


def test_comment_callback_is_used_verbatim():
    info = Info(AuditContext(identity=_identity()))
    info.comment_callback = lambda current: f"custom for {current.get_user_name()}"

    assert info.define_property("comment") == "custom for alice"
