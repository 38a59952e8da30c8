import os
import tempfile

# keep test log files out of the working tree; must run before utils.logger is imported
os.environ.setdefault('HEALTH_AGENT_LOG_DIR', tempfile.mkdtemp(prefix='health-agent-logs-'))
