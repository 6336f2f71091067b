import logfire

# Must run before idverify.application.api.rest.app is imported
logfire.configure(send_to_logfire=False, console=False)
